"""
Main entry point for turbulent premixed hydrogen flame simulation

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.
"""

import os
import time
import traceback
from datetime import datetime
from flameclosures import Simulation, SimulationParameters
from flameclosures.core import TeeLogger

# !important: numba kernels and the tri-diagonal solves are small, a single blas thread is faster
os.environ['OPENBLAS_NUM_THREADS'] = '1'


#* about the closure models
# the reaction rate (TFC, ETFC, FSD), the burning velocity correlations and the diffusivity model are selected by the
# 'model' entries of the coefficient dictionaries, see Simulation.combustion_coeffs and Simulation.transport_coeffs.
#* about the gas phase composition
# the unburnt mixture is hydrogen/air diluted with steam, X_H2_0 is the hydrogen mole fraction of the dry mixture.
# the mechanism file must contain H2, O2, H2O and N2, the default h2o2.yaml is shipped with cantera.

STUDY_NAME = "steam_dilution"
STEAM_FRACTIONS = [0.0, 0.1, 0.2]


def run_case(result_dir: str, X_H2O: float) -> dict:
    """run one steam dilution case and return its key results"""
    case_name = f"X_H2O_{X_H2O:.2f}"
    params = SimulationParameters(
        case_name=case_name,
        X_H2_0=0.15,  # hydrogen mole fraction of the dry mixture
        X_H2O=X_H2O,  # steam mole fraction
        initial_pressure=1.0e5,  # unit[Pa]
        initial_temperature=300.0,  # unit[K]
        cell_count=200,
        domain_length=0.2,  # unit[m]
        time_step=1.0e-4,  # unit[s]
        end_time=2.0e-2,  # unit[s]
        nut=1.0e-4,  # eddy viscosity, unit[m2/s]
        k=0.1,  # turbulent kinetic energy, unit[m2/s2]
        reaction_rate_model='ETFC',  # TFC, ETFC or FSD
        turbulent_burning_velocity_model='Zimont',  # Zimont, Bradley or Bray
        transport_model='nonUnityLewisDiffusivity',
        run_info_file=os.path.join(result_dir, f"{case_name}_runInfo.csv")
    )
    simulation = Simulation(params)
    simulation.initialize()
    wall_start = time.time()
    simulation.run()
    return {
        'case': case_name,
        'flame_position': simulation.flame_position(),
        'T_burnt': simulation.T_burnt,
        'wall_time': time.time() - wall_start
    }


def main():
    result_dir = os.path.join("result", STUDY_NAME)
    os.makedirs(result_dir, exist_ok=True)
    log_filename = os.path.join(result_dir, f"{STUDY_NAME}.log")

    with TeeLogger(log_filename):
        start_datetime = datetime.now()
        print(f"=== Turbulent Premixed Flame Study: {STUDY_NAME} ===")
        print(f"Steam fractions: {STEAM_FRACTIONS}")
        print(f"Start Time: {start_datetime.strftime('%Y-%m-%d %H:%M:%S')}")
        print("="*50)

        results = []
        try:
            for X_H2O in STEAM_FRACTIONS:
                results.append(run_case(result_dir, X_H2O))
        except Exception as e:
            print(f"ERROR: case failed with exception: {str(e)}")
            print(traceback.format_exc())
            raise

        print("=== steam dilution summary ===")
        for result in results:
            print(f"* {result['case']}: flame position {result['flame_position'] * 1e3:.2f} mm, "
                  f"adiabatic flame temperature {result['T_burnt']:.1f} K, wall time {result['wall_time']:.1f} s")
        print(f"Total Wall Clock Time: {(datetime.now() - start_datetime).total_seconds():.2f} seconds")
        print("="*50)


if __name__ == "__main__":
    main()
