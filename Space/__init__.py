from .action import QLAction
from .errors import ModelUnavailableError, QLConfigError
from .logging import EpisodeLifecycleLogger
from .search_space import QLSpace, index_distance
from .state import QLInput, QLState

__all__ = [
	"QLAction",
	"QLInput",
	"QLState",
	"QLSpace",
	"index_distance",
	"QLConfigError",
	"ModelUnavailableError",
	"EpisodeLifecycleLogger",
]
