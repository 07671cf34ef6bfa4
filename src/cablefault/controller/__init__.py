from cablefault.controller.engine import FieldEngine, build_grid, effective_radius
from cablefault.controller.interaction import InteractionController
