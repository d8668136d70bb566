from typing import Callable

import numpy as np

from pathtrace.typings.ray import Ray

# Background radiance as a function of an escaping ray. Scenes rendered with
# worker processes need a picklable sky (a module-level function or class).
Sky = Callable[[Ray], np.ndarray]
