import unittest
import warnings

import numpy as np
import openmdao.api as om
from openmdao.utils.assert_utils import assert_check_partials, assert_near_equal

import reentry
from reentry.phase import Phase
from reentry.transcriptions import Rectangular, Trapezoidal
from reentry.utils.testing_utils import DoubleIntegratorODE, DecayODE


def _double_integrator_phase(transcription, objective=True):
    phase = Phase(ode_class=DoubleIntegratorODE, transcription=transcription)

    phase.set_time_options(units='s', initial=0.0, dt=0.1)

    phase.add_state('x', units='m', rate_source='x_dot', targets=[], fix_initial=True)
    phase.add_state('v', units='m/s', rate_source='v_dot', fix_initial=True, fix_final=True)

    phase.add_control('u', units='m/s**2', lower=-1.0, upper=1.0)

    if objective:
        phase.add_objective('x', loc='final', ref=-1.0)

    return phase


class TestPhaseConfiguration(unittest.TestCase):

    def setUp(self):
        self.phase = Phase(ode_class=DoubleIntegratorODE, transcription=Rectangular(num_nodes=5))
        self.phase.add_state('v', units='m/s', rate_source='v_dot')
        self.phase.add_control('u', units='m/s**2')

    def test_state_control_name_clash(self):
        with self.assertRaises(ValueError) as e:
            self.phase.add_control('v')
        self.assertEqual(str(e.exception), 'v has already been added as a state.')

        with self.assertRaises(ValueError) as e:
            self.phase.add_state('u')
        self.assertEqual(str(e.exception), 'u has already been added as a control.')

    def test_time_name_clash(self):
        with self.assertRaises(ValueError):
            self.phase.add_state('time')

        with self.assertRaises(ValueError):
            self.phase.add_control('time')

    def test_set_state_options_updates(self):
        self.phase.set_state_options('v', lower=0.0, ref=10.0)

        self.assertEqual(self.phase.state_options['v']['units'], 'm/s')
        self.assertEqual(self.phase.state_options['v']['lower'], 0.0)
        self.assertEqual(self.phase.state_options['v']['ref'], 10.0)

    def test_invalid_dt_bounds(self):
        with self.assertRaises(ValueError) as e:
            self.phase.set_time_options(dt_bounds=(1.5, 0.5))
        self.assertEqual(str(e.exception), 'dt_bounds lower bound (1.5) exceeds the upper bound (0.5).')

    def test_invalid_locations(self):
        with self.assertRaises(ValueError):
            self.phase.add_boundary_constraint('v', loc='middle', equals=0.0)

        with self.assertRaises(ValueError):
            self.phase.add_objective('v', loc='middle')

    def test_targets(self):
        self.phase.add_state('x', rate_source='x_dot', targets=[])

        self.assertEqual(self.phase.get_state_targets('v'), ['v'])
        self.assertEqual(self.phase.get_state_targets('x'), [])
        self.assertEqual(self.phase.get_control_targets('u'), ['u'])

    def test_interp(self):
        assert_near_equal(self.phase.interp('v', [0.0, 4.0]), [0.0, 1.0, 2.0, 3.0, 4.0],
                          tolerance=1.0E-12)
        assert_near_equal(self.phase.interp('v', 3.0), 3.0 * np.ones(5))
        assert_near_equal(self.phase.interp('u', xs=[10.0, 20.0], ys=[-1.0, 1.0]),
                          [-1.0, -0.5, 0.0, 0.5, 1.0], tolerance=1.0E-12)

        with self.assertRaises(ValueError):
            self.phase.interp('time', [0.0, 1.0])


class TestPhaseSetup(unittest.TestCase):

    def test_design_vars_rectangular(self):
        p = om.Problem()
        p.model.add_subsystem('phase0', _double_integrator_phase(Rectangular(num_nodes=11)))
        p.setup()
        p.final_setup()

        dvs = p.model.get_design_vars(use_prom_ivc=False)

        assert_near_equal(dvs['phase0.indep_vars.states:x']['indices'].as_array(), np.arange(1, 11))
        assert_near_equal(dvs['phase0.indep_vars.states:v']['indices'].as_array(), np.arange(1, 10))
        # The control at the final knot does not enter the rectangular rule.
        assert_near_equal(dvs['phase0.indep_vars.controls:u']['indices'].as_array(), np.arange(10))
        self.assertNotIn('phase0.indep_vars.dt', dvs)

    def test_design_vars_trapezoidal_free_dt(self):
        p = om.Problem()
        phase = p.model.add_subsystem('phase0',
                                      _double_integrator_phase(Trapezoidal(num_nodes=11)))
        phase.set_time_options(fix_dt=False, dt_bounds=(0.05, 0.15))
        p.setup()
        p.final_setup()

        dvs = p.model.get_design_vars(use_prom_ivc=False)

        assert_near_equal(dvs['phase0.indep_vars.controls:u']['indices'].as_array(), np.arange(11))
        self.assertIn('phase0.indep_vars.dt', dvs)
        assert_near_equal(dvs['phase0.indep_vars.dt']['lower'], 0.05)
        assert_near_equal(dvs['phase0.indep_vars.dt']['upper'], 0.15)

    def test_time_connected_to_targets(self):
        p = om.Problem()
        phase = p.model.add_subsystem('phase0', Phase(ode_class=DecayODE,
                                                      transcription=Trapezoidal(num_nodes=6)))
        phase.set_time_options(units='s', initial=2.0, dt=0.5, targets=['t'])
        phase.add_state('x', rate_source='x_dot')
        phase.add_objective('time', loc='final')
        p.setup()
        p.run_model()

        assert_near_equal(p.get_val('phase0.time'), np.linspace(2.0, 4.5, 6), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.rhs.t'), np.linspace(2.0, 4.5, 6), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.t_duration'), 2.5)

    def test_boundary_and_path_constraints(self):
        p = om.Problem()
        phase = p.model.add_subsystem('phase0',
                                      _double_integrator_phase(Rectangular(num_nodes=11)))
        phase.add_boundary_constraint('x_dot', loc='final', upper=1.0)
        phase.add_path_constraint('v_dot', lower=-2.0, upper=2.0)
        p.setup()
        p.final_setup()

        cons = p.model.get_constraints()

        self.assertIn('phase0->final_boundary_constraint->x_dot', cons)
        assert_near_equal(cons['phase0->final_boundary_constraint->x_dot']['indices'].as_array(), [10])
        assert_near_equal(cons['phase0->final_boundary_constraint->x_dot']['upper'], 1.0)

        self.assertIn('phase0.collocation_constraint.step_defects:x', cons)
        self.assertIn('phase0.collocation_constraint.step_defects:v', cons)

    def test_no_objective_warns(self):
        p = om.Problem()
        p.model.add_subsystem('phase0', _double_integrator_phase(Rectangular(num_nodes=5),
                                                                 objective=False))

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter('always')
            p.setup()
            p.final_setup()

        self.assertTrue(any('No objective has been added to the phase.' in str(msg.message)
                            for msg in w))

    def test_missing_rate_source(self):
        p = om.Problem()
        phase = p.model.add_subsystem('phase0', Phase(ode_class=DoubleIntegratorODE,
                                                      transcription=Rectangular(num_nodes=5)))
        phase.add_state('v')
        phase.add_control('u')

        with self.assertRaises(ValueError) as e:
            p.setup()
        self.assertIn('state v has no rate_source', str(e.exception))


class TestPhaseDefects(unittest.TestCase):

    def _propagated_defects(self, transcription, step):
        nn = transcription.grid_data.num_nodes
        dt = 0.1
        u = np.sin(np.linspace(0.0, np.pi, nn))

        x = np.zeros(nn)
        v = np.zeros(nn)
        for i in range(nn - 1):
            x[i + 1], v[i + 1] = step(x[i], v[i], u[i], u[i + 1], dt)

        p = om.Problem()
        p.model.add_subsystem('phase0', _double_integrator_phase(transcription))
        p.setup()

        p.set_val('phase0.states:x', x)
        p.set_val('phase0.states:v', v)
        p.set_val('phase0.controls:u', u)
        p.run_model()

        return p

    def test_euler_propagation_satisfies_rectangular_rule(self):
        def euler(x, v, u0, u1, dt):
            return x + dt * v, v + dt * u0

        p = self._propagated_defects(Rectangular(num_nodes=11), euler)

        assert_near_equal(p.get_val('phase0.collocation_constraint.step_defects:x'),
                          np.zeros(10), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.collocation_constraint.step_defects:v'),
                          np.zeros(10), tolerance=1.0E-12)

    def test_trapezoid_propagation_satisfies_trapezoidal_rule(self):
        def trapezoid(x, v, u0, u1, dt):
            v_next = v + 0.5 * dt * (u0 + u1)
            return x + 0.5 * dt * (v + v_next), v_next

        p = self._propagated_defects(Trapezoidal(num_nodes=11), trapezoid)

        assert_near_equal(p.get_val('phase0.collocation_constraint.step_defects:x'),
                          np.zeros(10), tolerance=1.0E-12)
        assert_near_equal(p.get_val('phase0.collocation_constraint.step_defects:v'),
                          np.zeros(10), tolerance=1.0E-12)


class TestPhaseOptimization(unittest.TestCase):

    def test_double_integrator_rectangular(self):
        p = om.Problem()
        p.driver = om.ScipyOptimizeDriver(optimizer='SLSQP', tol=1.0E-9, maxiter=200)

        phase = p.model.add_subsystem('phase0',
                                      _double_integrator_phase(Rectangular(num_nodes=11)))
        p.setup()

        p.set_val('phase0.states:x', phase.interp('x', [0.0, 0.2]))
        p.set_val('phase0.states:v', 0.0)
        p.set_val('phase0.controls:u', 0.0)

        p.run_driver()
        self.assertTrue(p.driver.result.success)

        # Full acceleration for the first half of the steps, full braking for the rest.
        assert_near_equal(p.get_val('phase0.states:x')[-1], 0.25, tolerance=1.0E-4)
        assert_near_equal(p.get_val('phase0.controls:u')[:10],
                          [1.0] * 5 + [-1.0] * 5, tolerance=1.0E-4)
        assert_near_equal(p.get_val('phase0.states:v')[-1], 0.0, tolerance=1.0E-12)

    def test_double_integrator_partials(self):
        with reentry.options.temporary(include_check_partials=True):
            p = om.Problem()
            p.model.add_subsystem('phase0', _double_integrator_phase(Trapezoidal(num_nodes=7)))
            p.setup(force_alloc_complex=True)

            p.set_val('phase0.states:x', np.linspace(0.0, 1.0, 7))
            p.set_val('phase0.states:v', np.linspace(0.0, 2.0, 7))
            p.set_val('phase0.controls:u', np.linspace(1.0, -1.0, 7))
            p.run_model()

            cpd = p.check_partials(method='cs', compact_print=True, out_stream=None)
            assert_check_partials(cpd)


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
