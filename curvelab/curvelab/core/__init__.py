from .renderer import Renderer, RendererUnavailable, RenderOutcome  # noqa: F401
from .trace_store import PendingOperation, TraceStore  # noqa: F401
from .traces import ColorRegistry, Trace, TraceDataError, TraceKind  # noqa: F401
