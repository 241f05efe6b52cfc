"""
neuronet

Fully-connected feed-forward neural networks: dense vector and matrix
primitives, the activation catalog, forward inference, back-propagation,
plain and momentum gradient descent, drop-out and a text format for
trained weights.
"""

from .errors import *
from .activations import *
from .linalg import *
from .networks import *
from .trainer import *
from .persistence import *
from .utils import *

__version__ = "0.1.0"

__all__ = [
    # Errors
    'NeuroNetError',
    'ShapeError',
    'ShapeMismatchError',
    'ConfigurationError',
    'FormatError',

    # Activations
    'ActivationType',
    'Activation',
    'get_activation',

    # Linear algebra
    'Vector',
    'Matrix',

    # Networks
    'NeuroStructure',
    'Network',

    # Training
    'TrainParameters',
    'TrainingStatus',
    'TrainingHistory',
    'TrainingResult',
    'Trainer',

    # Persistence
    'dumps',
    'loads',
    'save_network',
    'load_network',
    'checkpoint_filename',
    'save_checkpoint',

    # Utils
    'make_rng',
    'get_initializer',
    'plot_history',
]
