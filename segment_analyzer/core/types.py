"""
Type definitions for segment analysis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union


class Const:
    """Sentinel identifiers shared across the analyzer."""
    NONE = 0
    USER_SERVICE_ID = 1
    USER_INSTANCE_ID = 1
    USER_ENDPOINT_ID = 1
    USER_CODE = 'User'
    UNSET_PEER_ID = 0


class DetectPoint(str, Enum):
    SERVER = 'SERVER'
    CLIENT = 'CLIENT'


class RequestType(str, Enum):
    HTTP = 'HTTP'
    DATABASE = 'DATABASE'
    RPC = 'RPC'


class SpanLayer(str, Enum):
    UNKNOWN = 'Unknown'
    DATABASE = 'Database'
    RPC_FRAMEWORK = 'RPCFramework'
    HTTP = 'Http'
    MQ = 'MQ'
    CACHE = 'Cache'


class SpanType(str, Enum):
    ENTRY = 'Entry'
    EXIT = 'Exit'
    LOCAL = 'Local'


class ListenerPoint(str, Enum):
    """Events a span listener can declare interest in."""
    ENTRY = 'Entry'
    EXIT = 'Exit'
    GLOBAL_TRACE_IDS = 'TraceIds'


class SpanTags:
    DB_STATEMENT = 'db.statement'
    DB_TYPE = 'db.type'


@dataclass(frozen=True)
class KeyStringValuePair:
    key: str
    value: str


@dataclass(frozen=True)
class ReferenceDecorator:
    """Cross-process reference from an entry span to its parent call leg."""
    parent_endpoint_id: int = Const.NONE
    parent_service_instance_id: int = Const.NONE
    network_address_id: int = Const.NONE
    parent_span_id: int = -1
    parent_trace_segment_id: str = ''


@dataclass(frozen=True)
class SpanDecorator:
    """Read-only view of one decoded span."""
    span_id: int
    span_type: SpanType
    span_layer: SpanLayer = SpanLayer.UNKNOWN
    start_time: int = 0
    end_time: int = 0
    parent_span_id: int = -1
    is_error: bool = False
    operation_name_id: int = Const.NONE
    peer_id: int = Const.UNSET_PEER_ID
    component_id: int = Const.NONE
    tags: Tuple[KeyStringValuePair, ...] = ()
    refs: Tuple[ReferenceDecorator, ...] = ()

    @property
    def refs_count(self) -> int:
        return len(self.refs)


@dataclass(frozen=True)
class UniqueId:
    """Multi-part global trace identifier."""
    id_parts: Tuple[Union[int, str], ...]


@dataclass(frozen=True)
class SegmentCoreInfo:
    """Segment-level metadata shared by every span event of one segment."""
    segment_id: str
    service_id: int
    service_instance_id: int
    start_time: int = 0
    end_time: int = 0
    minute_time_bucket: int = 0
    is_error: bool = False


@dataclass(frozen=True)
class TraceSegment:
    """A decoded segment: its ids, global trace ids and spans in order."""
    segment_id: str
    service_id: int
    service_instance_id: int
    global_trace_ids: Tuple[UniqueId, ...] = ()
    spans: Tuple[SpanDecorator, ...] = field(default_factory=tuple)


class DBLatencyThresholds:
    """Per-database-type slow statement thresholds, in milliseconds."""

    DEFAULT_KEY = 'default'
    FALLBACK_THRESHOLD = 10000

    def __init__(self, thresholds: Union[str, Mapping[str, int], None] = 'default:200,mongodb:100'):
        """
        Initialize the threshold table.

        Args:
            thresholds: Either a "type:millis,type:millis" string or a mapping
                        of database type to threshold.

        Raises:
            ValueError: If an entry is malformed or a threshold is negative
        """
        self._thresholds: Dict[str, int] = {}
        if thresholds is None:
            return
        if isinstance(thresholds, str):
            self._parse(thresholds)
        else:
            for db_type, threshold in thresholds.items():
                self._put(db_type, threshold)

    def _parse(self, setting: str) -> None:
        for entry in setting.split(','):
            entry = entry.strip()
            if not entry:
                continue
            db_type, sep, threshold = entry.partition(':')
            if not sep:
                raise ValueError(f"Invalid threshold entry '{entry}'. Expected 'type:millis'")
            try:
                value = int(threshold.strip())
            except ValueError:
                raise ValueError(f"Invalid threshold value in entry '{entry}'") from None
            self._put(db_type, value)

    def _put(self, db_type: str, threshold: int) -> None:
        if threshold < 0:
            raise ValueError(f"Threshold for '{db_type}' must not be negative")
        self._thresholds[db_type.strip().lower()] = int(threshold)

    def get_threshold(self, db_type: Optional[str]) -> int:
        """
        Look up the threshold for a database type.

        Unknown types fall back to the 'default' entry.
        """
        if db_type:
            threshold = self._thresholds.get(db_type.strip().lower())
            if threshold is not None:
                return threshold
        return self._thresholds.get(self.DEFAULT_KEY, self.FALLBACK_THRESHOLD)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._thresholds)


class TraceServiceConfig:
    """Configuration for segment analysis."""

    def __init__(
        self,
        max_slow_sql_length: int = 2000,
        db_latency_thresholds: Union[DBLatencyThresholds, str, Mapping[str, int], None] = None
    ):
        """
        Initialize segment analysis configuration.

        Args:
            max_slow_sql_length: Statements longer than this are truncated to
                                 this many characters before being recorded.
                                 Default: 2000

            db_latency_thresholds: Per-database-type latency thresholds used to
                                   decide whether an access is slow. Accepts a
                                   DBLatencyThresholds, a "type:millis,..."
                                   string or a mapping.
                                   Default: "default:200,mongodb:100"
        """
        if max_slow_sql_length <= 0:
            raise ValueError("max_slow_sql_length must be positive")
        self.max_slow_sql_length = max_slow_sql_length

        if db_latency_thresholds is None:
            db_latency_thresholds = DBLatencyThresholds()
        elif not isinstance(db_latency_thresholds, DBLatencyThresholds):
            db_latency_thresholds = DBLatencyThresholds(db_latency_thresholds)
        self.db_latency_thresholds = db_latency_thresholds
