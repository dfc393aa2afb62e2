from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'attempts': 0,
        'tree_nodes': 0,
        'doors_main': 0,
        'doors_side': 0,
        'doors_inverse': 0,
        'energy': 0,
        'drones': 0,
        'rocks': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
