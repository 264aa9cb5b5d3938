"""Módulo core - seleção do valor oficial de Empacotamento."""

from .exceptions import (
    MonitorError,
    ExtractionError,
    ParseFailure,
    NoActualSeriesFound,
    ConfigError,
    FetchError,
    NotificationError,
)
from .models import (
    SeriesKind,
    CandidateRecord,
    ThresholdSet,
    Assessment,
    SelectionResult,
    ExtractionResult,
)
from .time_bucket import last_complete_bucket, last_complete_hour
from .classifier import classify
from .record_parser import parse_payload
from .selector import select
from .assessment import assess_condition

__all__ = [
    'MonitorError',
    'ExtractionError',
    'ParseFailure',
    'NoActualSeriesFound',
    'ConfigError',
    'FetchError',
    'NotificationError',
    'SeriesKind',
    'CandidateRecord',
    'ThresholdSet',
    'Assessment',
    'SelectionResult',
    'ExtractionResult',
    'last_complete_bucket',
    'last_complete_hour',
    'classify',
    'parse_payload',
    'select',
    'assess_condition',
]
