from .probe_events import ProbeEventSource
from .region_probe import RegionProbe, template_similarity

__all__ = ["ProbeEventSource", "RegionProbe", "template_similarity"]
