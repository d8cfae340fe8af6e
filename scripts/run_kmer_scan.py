#!/usr/bin/env python3
"""
Solid k-mer Scan with Early Stopping.

Streams a FASTA/FASTQ file (optionally gzipped), counts distinct canonical
k-mers seen at least twice, and stops once the discovery rate plateaus.

OUTPUT:
├── stdout                 # One status line per 10,000 reads
├── --output-json PATH     # Scan summary and status trajectory
├── --trajectory-csv PATH  # Status trajectory as a table
└── ws://HOST:PORT/ws      # Live "<reads> <kmers>" frames (with --serve)

Usage:
    python scripts/run_kmer_scan.py -k 31 -i reads.fastq.gz

    python scripts/run_kmer_scan.py -k 31 -i reads.fastq.gz \
        --serve --port 3030 --output-json scan.json
"""

import argparse
import json
import sys
from contextlib import ExitStack
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from kmerscan.constants import DEFAULT_HOST, DEFAULT_PORT, get_default_config  # noqa: E402


def save_json(data: Dict, path: Path) -> None:
    """Save dict as JSON."""
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)
    print(f"  ✓ Saved: {path.name}")


def print_header(title: str) -> None:
    """Print formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = get_default_config()
    parser = argparse.ArgumentParser(
        description='Estimate solid k-mer cardinality with early stopping'
    )
    parser.add_argument('-k', '--k', type=int, required=True, help='Length of k-mers')
    parser.add_argument('-i', '--input', type=Path, required=True,
                        help='Input FASTA/FASTQ file (.gz supported, - for stdin)')
    parser.add_argument('--stride', type=int, default=defaults['sample_stride'],
                        help='Reads between convergence samples')
    parser.add_argument('--window', type=int, default=defaults['window_capacity'],
                        help='Growth/acceleration window size')
    parser.add_argument('--min-reads', type=int, default=defaults['min_records'],
                        help='Reads that must be exceeded before stopping early')
    parser.add_argument('--accel-threshold', type=float, default=defaults['accel_threshold'],
                        help='Stop when |average acceleration| falls below this')
    parser.add_argument('--serve', action='store_true',
                        help='Broadcast progress over a websocket')
    parser.add_argument('--host', default=DEFAULT_HOST, help='Websocket bind address')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT, help='Websocket port')
    parser.add_argument('--channel-capacity', type=int, default=defaults['channel_capacity'],
                        help='Progress snapshots buffered for the websocket')
    parser.add_argument('--send-timeout', type=float, default=defaults['send_timeout'],
                        help='Seconds a full progress channel may hold back the scan')
    parser.add_argument('--on-sink-error', choices=['continue', 'abort'],
                        default='continue',
                        help='Keep scanning or abort when progress cannot be delivered')
    parser.add_argument('--output-json', type=Path, help='Write scan summary as JSON')
    parser.add_argument('--trajectory-csv', type=Path, help='Write status trajectory as CSV')
    parser.add_argument('--quiet', action='store_true', help='Suppress status lines')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    
    from kmerscan.analysis import ConvergenceConfig
    from kmerscan.streaming import (
        ProgressChannel,
        ProgressServer,
        RecordDecodeError,
        SinkErrorPolicy,
        scan_file,
    )
    
    start_time = datetime.now()
    verbose = not args.quiet
    
    if verbose:
        print_header("SOLID K-MER SCAN")
        print(f"Input:   {args.input}")
        print(f"k:       {args.k}")
        print(f"Started: {start_time.isoformat()}")
    
    try:
        config = ConvergenceConfig(
            window_capacity=args.window,
            min_records=args.min_reads,
            accel_threshold=args.accel_threshold,
        )
        with ExitStack() as stack:
            channel = None
            if args.serve:
                channel = stack.enter_context(
                    ProgressChannel(capacity=args.channel_capacity, send_timeout=args.send_timeout)
                )
                server = stack.enter_context(
                    ProgressServer(channel, host=args.host, port=args.port)
                )
                if verbose:
                    print(f"Broadcasting: {server.url}")
            
            result = scan_file(
                args.input,
                args.k,
                config=config,
                sample_stride=args.stride,
                sink=channel,
                sink_policy=SinkErrorPolicy(args.on_sink_error),
                verbose=verbose,
            )
    except (FileNotFoundError, RecordDecodeError, ValueError, RuntimeError) as e:
        print(f"❌ ERROR: {e}")
        return 1
    
    duration = (datetime.now() - start_time).total_seconds()
    
    if verbose:
        print_header("SUMMARY")
        print(f"Reads processed: {result.records_processed:,}")
        print(f"Reads skipped:   {result.records_skipped:,} (shorter than k)")
        print(f"K-mers observed: {result.kmers_observed:,}")
        print(f"Distinct k-mers: {result.distinct_kmers:,}")
        print(f"Solid k-mers:    {result.solid_kmers:,}")
        print(f"Stopped early:   {result.stopped_early}")
        print(f"Duration:        {duration:.1f} seconds")
    
    if args.output_json:
        summary = result.to_dict()
        summary['metadata'] = {
            'input': str(args.input),
            'analysis_timestamp': start_time.isoformat(),
            'duration_seconds': duration,
        }
        save_json(summary, args.output_json)
    
    if args.trajectory_csv:
        result.to_dataframe().to_csv(args.trajectory_csv, index=False)
        print(f"  ✓ Saved: {args.trajectory_csv.name}")
    
    return 0


if __name__ == '__main__':
    sys.exit(main())
