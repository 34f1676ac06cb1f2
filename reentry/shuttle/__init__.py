"""
Maximum-crossrange reentry of the Space Shuttle.

References
----------
.. [1] Betts, John T., Practical Methods for Optimal Control and Estimation Using Nonlinear
        Programming, p. 248, 2010.
"""
from .shuttle_ode import ShuttleODE as ShuttleODE
