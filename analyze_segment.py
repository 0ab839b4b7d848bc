#!/usr/bin/env python3
"""
Segment Analyzer - command line entry point
"""

import json
import sys
from segment_analyzer import SegmentAnalyzer, TraceServiceConfig
from segment_analyzer.storage import InMemorySourceReceiver, InventoryCaches
from segment_analyzer.web import prepare_results


def main(argv=None):
    import argparse
    parser = argparse.ArgumentParser(
        description='Derive topology and metric records from trace segment JSON files.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_segment.py inventory.json segments.json
  python analyze_segment.py inventory.json segments.json -o records.json
  python analyze_segment.py inventory.json segments.json --max-slow-sql-length 500
  python analyze_segment.py inventory.json segments.json --slow-db-threshold default:200,mysql:100
        """
    )
    parser.add_argument('inventory_file', help='Path to the inventory JSON file (services, instances, endpoints)')
    parser.add_argument('segment_file', help='Path to the segment JSON file')
    parser.add_argument('-o', '--output', dest='output_file', default='segment_analysis.json', help='Output JSON file')
    parser.add_argument('--max-slow-sql-length', type=int, default=2000,
                       help='Truncate recorded slow statements to this many characters')
    parser.add_argument('--slow-db-threshold', default='default:200,mongodb:100',
                       help='Per database type slow statement thresholds in ms, e.g. default:200,mysql:100')
    args = parser.parse_args(argv)

    try:
        config = TraceServiceConfig(
            max_slow_sql_length=args.max_slow_sql_length,
            db_latency_thresholds=args.slow_db_threshold
        )
        print(f"\nConfiguration:")
        print(f"  Inventory file: {args.inventory_file}")
        print(f"  Segment file: {args.segment_file}")
        print(f"  Max slow SQL length: {config.max_slow_sql_length}")
        print(f"  Slow DB thresholds: {config.db_latency_thresholds.as_dict()}\n")

        caches = InventoryCaches.from_file(args.inventory_file)
        receiver = InMemorySourceReceiver()
        analyzer = SegmentAnalyzer(caches, config, receiver)
        analyzer.process_segment_file(args.segment_file)

        results = prepare_results(analyzer, receiver.records)
        with open(args.output_file, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2)

        print(f"Processed {analyzer.segment_count} segments")
        for scope, count in sorted(results['summary']['records_by_scope'].items()):
            print(f"  {scope}: {count}")
        print(f"\n✓ Analysis complete! Results written to {args.output_file}")
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
