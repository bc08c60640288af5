"""
Pydantic models for configuration, declarative pipelines and performance
reports.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
)


class LazyConfig(BaseModel):
    """Toolkit-wide settings applied by utils.setup_logging()"""
    log_level: str = Field(
        "WARNING",
        description="Level name for the toolkit's loggers"
    )
    log_format: str = Field(
        DEFAULT_LOG_FORMAT,
        description="logging format string"
    )
    log_file: Optional[str] = Field(
        None,
        description="Also write log records to this file"
    )
    track_performance: bool = Field(
        True,
        description="Record measure_performance() results in the metrics store"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalize the level name and reject unknown levels"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class OperationType(str, Enum):
    """Sequence-producing LazyCollection methods usable in a declarative pipeline"""
    MAP = "map"
    FILTER = "filter"
    FILTER_NONE = "filter_none"
    TAP = "tap"
    TAKE = "take"
    SKIP = "skip"
    TAKE_WHILE = "take_while"
    SKIP_WHILE = "skip_while"
    UNTIL = "until"
    CHUNK = "chunk"
    BATCH = "batch"
    WINDOWS = "windows"
    SCAN = "scan"
    FLAT = "flat"
    FLAT_MAP = "flat_map"
    UNIQUE = "unique"
    UNIQUE_BY = "unique_by"
    ENUMERATE = "enumerate"
    PLUCK = "pluck"
    CYCLE = "cycle"
    REPEAT = "repeat"
    PAGE = "page"


_CALLBACK_OPERATIONS = {
    OperationType.MAP,
    OperationType.FILTER,
    OperationType.TAP,
    OperationType.TAKE_WHILE,
    OperationType.SKIP_WHILE,
    OperationType.UNTIL,
    OperationType.SCAN,
    OperationType.FLAT_MAP,
    OperationType.UNIQUE_BY,
}

_COUNT_OPERATIONS = {
    OperationType.TAKE,
    OperationType.SKIP,
    OperationType.CHUNK,
    OperationType.BATCH,
    OperationType.WINDOWS,
    OperationType.REPEAT,
}


class OperationSpec(BaseModel):
    """One step of a declarative pipeline"""
    type: OperationType = Field(..., description="Operation to apply")
    args: List[Any] = Field(
        default_factory=list,
        description="Positional arguments (callables are passed as objects)"
    )
    kwargs: Dict[str, Any] = Field(
        default_factory=dict,
        description="Keyword arguments"
    )

    @model_validator(mode='after')
    def validate_arguments(self):
        """Check the arguments fit the operation"""
        if self.type is OperationType.PAGE:
            values = list(self.args) + [
                self.kwargs[name] for name in ("page_number", "page_size") if name in self.kwargs
            ]
            if len(values) != 2 or not all(_is_int(value) for value in values):
                raise ValueError("Operation 'page' needs two integers: page_number and page_size")
            return self

        if not self.args:
            if self.type in _CALLBACK_OPERATIONS or self.type in _COUNT_OPERATIONS:
                raise ValueError(f"Operation '{self.type.value}' needs an argument")
            return self

        head = self.args[0]
        if self.type in _CALLBACK_OPERATIONS and not callable(head):
            raise ValueError(f"Operation '{self.type.value}' needs a callable, got {type(head).__name__}")
        if self.type in _COUNT_OPERATIONS and not _is_int(head):
            raise ValueError(f"Operation '{self.type.value}' needs an integer, got {type(head).__name__}")
        return self


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class PerformanceInfo(BaseModel):
    """Timing and memory of one measured call"""
    operation: str = Field(..., description="Name given to the measured call")
    execution_time_ms: float = Field(..., ge=0, description="Wall time in milliseconds")
    memory_usage_mb: float = Field(..., ge=0, description="Peak traced memory in MB")
    success: bool = Field(..., description="Whether the call returned normally")
    result_size: Optional[int] = Field(None, description="len() of the result when it has one")
    error: Optional[str] = Field(None, description="Error message when the call raised")
    timestamp: datetime = Field(default_factory=datetime.now)


class PerformanceSummary(BaseModel):
    """Aggregate over every recorded PerformanceInfo"""
    total_operations: int = 0
    total_time_ms: float = 0.0
    total_memory_mb: float = 0.0
    avg_time_ms: float = 0.0
    avg_memory_mb: float = 0.0


class PipelineResult(BaseModel):
    """Output of utils.process_lazy_operations()"""
    result: List[Any] = Field(..., description="Realized items")
    operations_applied: List[str] = Field(default_factory=list)
    processing_time_ms: float = Field(..., ge=0)
    memory_usage_mb: float = Field(..., ge=0)
    input_size: Optional[int] = Field(None, description="len() of the source when it has one")
    output_size: int = Field(..., ge=0)
    cached: bool = False

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "result": [4, 16, 36],
                "operations_applied": ["map", "filter", "take"],
                "processing_time_ms": 0.42,
                "memory_usage_mb": 0.01,
                "input_size": 100,
                "output_size": 3,
                "cached": False
            }
        }
    )
