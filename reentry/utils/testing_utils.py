import numpy as np
import openmdao.api as om


class DoubleIntegratorODE(om.ExplicitComponent):
    """
    A point mass driven by a bounded acceleration along a line.
    """
    def initialize(self):
        self.options.declare('num_nodes', types=(int,))

    def setup(self):
        nn = self.options['num_nodes']
        self.add_input('v', shape=(nn,), units='m/s')
        self.add_input('u', shape=(nn,), units='m/s**2')

        self.add_output('x_dot', shape=(nn,), units='m/s')
        self.add_output('v_dot', shape=(nn,), units='m/s**2')

        ar = np.arange(nn, dtype=int)
        self.declare_partials(of='x_dot', wrt='v', rows=ar, cols=ar, val=1.0)
        self.declare_partials(of='v_dot', wrt='u', rows=ar, cols=ar, val=1.0)

    def compute(self, inputs, outputs):
        outputs['x_dot'] = inputs['v']
        outputs['v_dot'] = inputs['u']


class DecayODE(om.ExplicitComponent):
    """
    Exponential decay with a time-varying forcing term, x_dot = -k * x + t.
    """
    def initialize(self):
        self.options.declare('num_nodes', types=(int,))
        self.options.declare('k', types=float, default=0.5)

    def setup(self):
        nn = self.options['num_nodes']
        self.add_input('x', shape=(nn,), units=None)
        self.add_input('t', shape=(nn,), units='s')

        self.add_output('x_dot', shape=(nn,), units='1/s')

        ar = np.arange(nn, dtype=int)
        self.declare_partials(of='x_dot', wrt='x', rows=ar, cols=ar, val=-self.options['k'])
        self.declare_partials(of='x_dot', wrt='t', rows=ar, cols=ar, val=1.0)

    def compute(self, inputs, outputs):
        outputs['x_dot'] = -self.options['k'] * inputs['x'] + inputs['t']
