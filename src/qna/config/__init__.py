from .bundle import load_bundle, load_initial_parameters
from .models import PrintOptions

__all__ = ["PrintOptions", "load_bundle", "load_initial_parameters"]
