"""
Utility functions for the lazy sequence toolkit.

Logging setup, performance measurement of lazy pipelines, and a runner for
pipelines described declaratively as a list of operations.
"""

import gc
import logging
import sys
import time
import tracemalloc
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from lazy import LazyCollection
from models import (
    LazyConfig,
    OperationSpec,
    PerformanceInfo,
    PerformanceSummary,
    PipelineResult,
)

# Loggers of the toolkit modules; setup_logging() sets their level
TOOLKIT_LOGGERS = (
    "combinators",
    "reducers",
    "sources",
    "search",
    "lazy",
    "utils",
)

logger = logging.getLogger(__name__)

_config = LazyConfig()

# Global performance tracking
_performance_metrics: List[PerformanceInfo] = []


def setup_logging(config: Optional[LazyConfig] = None) -> logging.Logger:
    """Setup structured logging for the toolkit and make `config` active"""
    global _config
    _config = config or LazyConfig()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if _config.log_file:
        handlers.append(logging.FileHandler(_config.log_file))
    logging.basicConfig(format=_config.log_format, handlers=handlers)

    level = logging.getLevelName(_config.log_level)
    for name in TOOLKIT_LOGGERS:
        logging.getLogger(name).setLevel(level)

    logger.info(f"Logging configured at {_config.log_level}")
    return logger


def get_config() -> LazyConfig:
    return _config


def _peak_memory_mb(started_tracing: bool) -> float:
    current, peak = tracemalloc.get_traced_memory()
    if started_tracing:
        tracemalloc.stop()
    return peak / 1024 / 1024


def measure_performance(operation_name: str, func: Callable, *args, **kwargs) -> PerformanceInfo:
    """
    Measure performance of a function call with memory tracking.

    The call's exception, if any, is recorded and then re-raised.
    """
    started_tracing = not tracemalloc.is_tracing()
    if started_tracing:
        tracemalloc.start()
    gc.collect()

    start_time = time.perf_counter()
    try:
        result = func(*args, **kwargs)
    except Exception as e:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        info = PerformanceInfo(
            operation=operation_name,
            execution_time_ms=execution_time_ms,
            memory_usage_mb=_peak_memory_mb(started_tracing),
            success=False,
            error=str(e),
        )
        _record(info)
        logger.error(f"{operation_name} failed after {execution_time_ms:.2f} ms: {e}")
        raise

    execution_time_ms = (time.perf_counter() - start_time) * 1000
    info = PerformanceInfo(
        operation=operation_name,
        execution_time_ms=execution_time_ms,
        memory_usage_mb=_peak_memory_mb(started_tracing),
        success=True,
        result_size=len(result) if hasattr(result, "__len__") else None,
    )
    _record(info)
    logger.debug(f"{operation_name} completed in {execution_time_ms:.2f} ms")
    return info


def _record(info: PerformanceInfo) -> None:
    if _config.track_performance:
        _performance_metrics.append(info)


def get_performance_summary() -> PerformanceSummary:
    """Get summary of all performance metrics"""
    count = len(_performance_metrics)
    if count == 0:
        return PerformanceSummary()

    total_time_ms = sum(info.execution_time_ms for info in _performance_metrics)
    total_memory_mb = sum(info.memory_usage_mb for info in _performance_metrics)
    return PerformanceSummary(
        total_operations=count,
        total_time_ms=total_time_ms,
        total_memory_mb=total_memory_mb,
        avg_time_ms=total_time_ms / count,
        avg_memory_mb=total_memory_mb / count,
    )


def clear_performance_metrics():
    """Clear all performance metrics"""
    _performance_metrics.clear()


def validate_lazy_evaluation(lazy_collection: Any) -> bool:
    """Validate that a collection is properly lazy"""
    return hasattr(lazy_collection, "_ops") and hasattr(lazy_collection, "_source")


def process_lazy_operations(source_data: Iterable[Any],
                            operations: List[Union[OperationSpec, Dict[str, Any]]],
                            enable_caching: bool = False) -> PipelineResult:
    """
    Build a LazyCollection chain from operation specs and realize it.

    Each operation is an OperationSpec or a dict validated into one, e.g.
    {"type": "map", "args": [lambda x: x * 2]}. Errors raised by callbacks
    propagate to the caller.
    """
    specs = [
        op if isinstance(op, OperationSpec) else OperationSpec.model_validate(op)
        for op in operations
    ]

    start_time = time.perf_counter()

    lazy_col = LazyCollection(source_data, cache_enabled=enable_caching)
    operations_applied = []
    for spec in specs:
        lazy_col = getattr(lazy_col, spec.type.value)(*spec.args, **spec.kwargs)
        operations_applied.append(spec.type.value)

    # Execute and get results
    started_tracing = not tracemalloc.is_tracing()
    if started_tracing:
        tracemalloc.start()
    gc.collect()

    try:
        result = lazy_col.to_list()
    finally:
        memory_mb = _peak_memory_mb(started_tracing)
    processing_time_ms = (time.perf_counter() - start_time) * 1000

    logger.debug(f"Pipeline {operations_applied} produced {len(result)} items")
    return PipelineResult(
        result=result,
        operations_applied=operations_applied,
        processing_time_ms=processing_time_ms,
        memory_usage_mb=memory_mb,
        input_size=len(source_data) if hasattr(source_data, "__len__") else None,
        output_size=len(result),
        cached=enable_caching,
    )
