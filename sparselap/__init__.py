"""
sparselap
=========

Python implementation of the Jonker-Volgenant shortest augmenting path algorithm
for linear assignment problems with sparse integer cost matrices,
including re-optimization of partial solutions.

"""

from .matching     import *
from .cost_matrix  import *
from .pqueue       import *
from .augmentation import *
from .lap          import *
