"""
Utility functions for the AVIF compression service.
"""
from avifpress.utils.metrics import (
    get_cpu_mem,
    get_disk_usage,
    measure_compression_performance,
    PerformanceTimer
)

from avifpress.utils.file_handling import (
    ensure_dir,
    sanitize_filename,
    save_incoming,
    resolve_derived_path,
    write_derived
)

__all__ = [
    # Metrics utilities
    'get_cpu_mem',
    'get_disk_usage',
    'measure_compression_performance',
    'PerformanceTimer',

    # File handling utilities
    'ensure_dir',
    'sanitize_filename',
    'save_incoming',
    'resolve_derived_path',
    'write_derived'
]
