"""
Result builder for API output.
"""

from collections import defaultdict
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, List


def _record_to_dict(record) -> Dict[str, Any]:
    return asdict(
        record,
        dict_factory=lambda items: {k: (v.value if isinstance(v, Enum) else v) for k, v in items}
    )


def prepare_results(analyzer, records: List[Any]) -> Dict[str, Any]:
    """
    Convert emitted records to a structured format for JSON output.

    Args:
        analyzer: SegmentAnalyzer instance with completed processing
        records: Records received by the sink, in emission order

    Returns:
        Dictionary with a summary, records grouped by scope, a service-level
        call summary and the slow statements sorted by latency
    """
    records_by_scope = defaultdict(list)
    for record in records:
        records_by_scope[record.scope].append(_record_to_dict(record))

    # Service-to-service calls, one row per (caller, callee, detect point)
    service_calls = defaultdict(lambda: {'count': 0, 'total_latency_ms': 0, 'error_count': 0})
    for record in records:
        if record.scope != 'ServiceRelation':
            continue
        key = (record.source_service_name, record.dest_service_name, record.detect_point.value)
        service_calls[key]['count'] += 1
        service_calls[key]['total_latency_ms'] += record.latency
        if not record.status:
            service_calls[key]['error_count'] += 1

    service_calls_list = []
    for (caller, callee, detect_point), stats in service_calls.items():
        service_calls_list.append({
            'caller': caller,
            'callee': callee,
            'detect_point': detect_point,
            'count': stats['count'],
            'total_latency_ms': stats['total_latency_ms'],
            'avg_latency_ms': stats['total_latency_ms'] / stats['count'],
            'error_count': stats['error_count'],
        })
    service_calls_list.sort(key=lambda x: -x['total_latency_ms'])

    slow_statements = sorted(records_by_scope.get('DatabaseSlowStatement', []),
                             key=lambda x: -x['latency'])

    return {
        'summary': {
            'total_segments': analyzer.segment_count,
            'total_records': len(records),
            'records_by_scope': {scope: len(items) for scope, items in records_by_scope.items()},
            'total_slow_statements': len(slow_statements),
        },
        'records': dict(records_by_scope),
        'service_calls': service_calls_list,
        'slow_statements': slow_statements,
    }
