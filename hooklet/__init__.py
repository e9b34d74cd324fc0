from importlib.metadata import version

from .hooklet import Hooklet, mount, unmount  # noqa: F401
from .hooks import (  # noqa: F401
    ComponentInstance,
    create_component,
    effect,
    HookOrderError,
    InvalidHookContextError,
    state,
    TooManyRendersError,
    use_effect,
    use_state,
)
from .renderers import *  # noqa: F401, F403
from .template import (  # noqa: F401
    compile_template,
    html,
    TemplateError,
    UnresolvedPlaceholderError,
)
from .types import EventLoopType  # noqa: F401
from .vdom import materialize  # noqa: F401
from .vnode import h, VNode  # noqa: F401

__version__ = version("hooklet")
