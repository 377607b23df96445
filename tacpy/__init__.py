from .aux_coefficients import AuxCoefficients
from .config import Config
from .coupling import Coupling
from .excitation import Excitation
from .geometry import Spherical
from .tac import TAC
from .translation import (
    CoAxialTranslationAdditionCoefficients,
    DegenerateRecurrenceError,
    TranslationAdditionCoefficients,
)

__version__ = "0.1.0"
