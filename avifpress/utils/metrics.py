"""
Utilities for measuring encode performance and host resource usage.
"""
import time
import logging
import psutil
from typing import Dict

# Set up logging
logger = logging.getLogger(__name__)


def get_cpu_mem() -> Dict[str, float]:
    """
    Get current CPU and memory usage.

    Returns:
        Dictionary with CPU and memory usage percentages
    """
    return {
        "cpu_usage": psutil.cpu_percent(interval=None),
        "memory_usage": psutil.virtual_memory().percent
    }


def get_disk_usage(path: str) -> float:
    """Percentage of the disk holding ``path`` that is in use."""
    return psutil.disk_usage(path).percent


def measure_compression_performance(
    original_size: int,
    compressed_size: int,
    compression_time: float
) -> Dict[str, float]:
    """
    Calculate compression performance metrics.

    Args:
        original_size: Size of the source image in bytes
        compressed_size: Size of the AVIF output in bytes
        compression_time: Time taken by the encoder in seconds

    Returns:
        Dictionary with compression ratio, space savings percentage, and encode speed
    """
    compression_ratio = original_size / compressed_size if compressed_size > 0 else 0
    space_savings = (1 - (compressed_size / original_size)) * 100 if original_size > 0 else 0
    compression_speed = original_size / (compression_time * 1024 * 1024) if compression_time > 0 else 0  # MB/s

    return {
        "compression_ratio": round(compression_ratio, 2),
        "space_savings_percent": round(space_savings, 2),
        "compression_speed_mbps": round(compression_speed, 2)
    }


class PerformanceTimer:
    """
    Context manager for measuring execution time.

    Example:
        with PerformanceTimer() as timer:
            encode()
        elapsed = timer.execution_time
    """

    def __init__(self):
        self.start_time = None
        self.execution_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.execution_time = time.perf_counter() - self.start_time
        return False
