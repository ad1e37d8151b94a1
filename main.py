from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from flowgraph.flow_builder import FlowBuilder

load_dotenv()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')

    print("=" * 60)
    print("FlowBuilder 테스트")
    print("=" * 60)

    base_dir = os.path.dirname(os.path.abspath(__file__))
    flow_path = os.getenv(
        "FLOWCHECK_SAMPLE_FLOW", os.path.join(base_dir, 'config', 'sample_flow.json')
    )

    builder = FlowBuilder()

    # 플로우 JSON 로드
    if not builder.load_from_json(flow_path):
        return

    # 검증
    report = builder.validate()
    print(f"\n유효 여부: {report.is_valid}")
    for error in report.errors:
        print(f"  {error}")

    # 그래프 정보 출력
    graph_info = builder.export_graph_info()
    print(f"\n총 노드 수: {graph_info['graph_stats']['nodes']}")
    print(f"총 엣지 수: {graph_info['graph_stats']['edges']}")
    print(f"DAG 여부: {graph_info['graph_stats']['is_dag']}")


if __name__ == "__main__":
    main()
