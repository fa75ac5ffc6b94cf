import csv
import io
import sys

import numpy as np
import pytest

from flameclosures import Simulation, SimulationParameters
from flameclosures.core import TeeLogger
from flameclosures.core.data_manager import RUN_INFO_HEADER


@pytest.fixture
def simulation(tmp_path):
    params = SimulationParameters(
        case_name="smoke",
        cell_count=30,
        domain_length=0.03,
        time_step=1e-4,
        end_time=5e-4,
        print_interval=2,
        run_info_file=str(tmp_path / "runInfo.csv")
    )
    simulation = Simulation(params)
    simulation.initialize()
    return simulation


def test_initial_state(simulation):
    assert simulation.T_burnt > 1000.0
    c = simulation.thermo.Y[simulation.combustion.c_index].values
    assert set(np.unique(c)) == {0.0, 1.0}
    np.testing.assert_allclose(sum(Y.values for Y in simulation.thermo.Y[:simulation.thermo.n_gas]), 1.0)


def test_flame_propagates(simulation, capsys):
    start = simulation.flame_position()
    simulation.run()
    assert simulation.runtime.iteration >= 5
    c = simulation.thermo.Y[simulation.combustion.c_index].values
    assert np.all((c >= 0.0) & (c <= 1.0))
    assert simulation.flame_position() >= start
    T = simulation.thermo.T.values
    assert np.all(T >= simulation.T_unburnt - 1e-9) and np.all(T <= simulation.T_burnt + 1e-9)
    assert "premixed flame performance" in capsys.readouterr().out

    with open(simulation.params.run_info_file, newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0] == RUN_INFO_HEADER
    assert len(rows) == simulation.runtime.iteration + 1


def test_tee_logger(tmp_path):
    terminal = io.StringIO()
    filename = tmp_path / "case.log"
    stdout = sys.stdout
    with TeeLogger(str(filename), terminal=terminal) as logger:
        assert sys.stdout is logger
        print("=== case ===")
    assert sys.stdout is stdout
    assert terminal.getvalue() == "=== case ===\n"
    assert filename.read_text(encoding='utf-8') == "=== case ===\n"


def test_run_stops_when_the_flame_crosses_the_domain(simulation):
    c = simulation.thermo.Y[simulation.combustion.c_index]
    c.assign(np.ones(simulation.mesh.cell_count))
    simulation.run()
    assert simulation.runtime.iteration == 1
    assert not simulation.runtime.is_running()
