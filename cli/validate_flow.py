#!/usr/bin/env python3
"""
CLI flow validator: checks an exported chatbot flow before activation
"""

import argparse
import json
import os
import sys
import logging
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv

# 프로젝트 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from flowgraph.flow_builder import FlowBuilder

load_dotenv()

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_LOAD_FAILED = 2


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level_name = os.getenv("FLOWCHECK_LOG_LEVEL", "INFO").upper()
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_file = os.getenv("FLOWCHECK_LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def print_summary(graph_info: Dict[str, Any]):
    """Print flow graph summary"""
    stats = graph_info["graph_stats"]
    print(f"\n 플로우 요약:")
    print(f"   Nodes: {stats['nodes']}")
    print(f"   Edges: {stats['edges']}")
    print(f"   DAG: {stats['is_dag']}")
    if graph_info["order"]:
        print(f"   Order: {' -> '.join(graph_info['order'])}")
    for node_type, node_ids in sorted(graph_info["type_groups"].items()):
        print(f"   {node_type}: {', '.join(node_ids)}")


def run(flow_path: str, as_json: bool = False, summary: bool = False) -> int:
    builder = FlowBuilder()
    if not builder.load_from_json(flow_path):
        print(f"❌ 플로우 파일을 불러오지 못했습니다: {flow_path}")
        return EXIT_LOAD_FAILED

    report = builder.validate()

    if as_json:
        payload: Dict[str, Any] = report.to_dict()
        if summary:
            payload["summary"] = builder.export_graph_info()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return EXIT_VALID if report.is_valid else EXIT_INVALID

    if report.is_valid:
        print(f"✅ Flow is valid: {flow_path}")
    else:
        print(f"❌ Flow has {len(report.errors)} error(s):")
        for error in report.errors:
            print(f"   - {error}")

    if summary:
        print_summary(builder.export_graph_info())

    return EXIT_VALID if report.is_valid else EXIT_INVALID


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function"""
    parser = argparse.ArgumentParser(
        description="챗봇 플로우 검증기",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate an exported flow
  python cli/validate_flow.py --flow config/sample_flow.json

  # Machine-readable report with graph summary
  python cli/validate_flow.py --flow config/sample_flow.json --json --summary
        """
    )

    parser.add_argument(
        '--flow',
        required=True,
        help='Path to flow JSON export ({"nodes": [...], "edges": [...]})'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the report as JSON'
    )

    parser.add_argument(
        '--summary',
        action='store_true',
        help='Also print node/edge counts, DAG status and traversal order'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    return run(args.flow, as_json=args.json, summary=args.summary)


if __name__ == "__main__":
    sys.exit(main())
