from importlib.metadata import version

__version__ = version("autotrack")


from .channels import ITERATE, ChannelKey, channels
from .node import ObservableNode, observable
from .proxy import NotObservableError, is_observable, to_raw
from .reaction import Reaction, autorun
from .tracking import ReactionDepthError, TrackingContext, context
