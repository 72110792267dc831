"""Graph Assembler node — indexes concepts and relationships into nodes and edges (no LLM)."""

from __future__ import annotations

from typing import Any, Callable

from langgraph.config import get_stream_writer

from conceptmap.agent.base import ToolNode
from conceptmap.agent.prompts.diagrams import DEFAULT_DIAGRAM_TYPE, DiagramProfile, get_diagram_profile
from conceptmap.models.schemas import Edge, Graph, Node, Relationship, dedupe_relationships
from conceptmap.utils.logging import get_logger

logger = get_logger(__name__)


def _mindmap_role(index: int, connections: int) -> str:
    if index == 0 or connections >= 5:
        return "central"
    if connections >= 3:
        return "branch"
    return "leaf"


def _flowchart_role(index: int, connections: int) -> str:
    if index == 0 or connections == 0:
        return "start"
    if connections == 1:
        return "end"
    if connections >= 3:
        return "decision"
    return "process"


def _network_role(index: int, connections: int) -> str:
    if connections >= 5:
        return "hub"
    if connections >= 2:
        return "node"
    return "endpoint"


def _tree_role(index: int, connections: int) -> str:
    if index == 0:
        return "root"
    if connections >= 3:
        return "parent"
    if connections >= 1:
        return "child"
    return "leaf"


def _orgchart_role(index: int, connections: int) -> str:
    if connections >= 5:
        return "executive"
    if connections >= 3:
        return "manager"
    if connections >= 2:
        return "team"
    return "member"


def _block_role(index: int, connections: int) -> str:
    if connections >= 5:
        return "system"
    if connections >= 3:
        return "component"
    if connections >= 1:
        return "module"
    return "interface"


_ROLE_RULES: dict[str, Callable[[int, int], str]] = {
    "mindmap": _mindmap_role,
    "flowchart": _flowchart_role,
    "network": _network_role,
    "tree": _tree_role,
    "orgchart": _orgchart_role,
    "block": _block_role,
}


def classify_node(profile: DiagramProfile, index: int, connections: int) -> str:
    """Node role from the profile's vocabulary; the last role when no rule exists."""
    rule = _ROLE_RULES.get(profile.key)
    if rule is None:
        return profile.node_types[-1]
    return rule(index, connections)


class GraphAssembler(ToolNode):
    """Build the indexed node/edge graph.

    One node per concept, repeated labels included. Endpoints resolve to the
    first node carrying the label; edges that do not resolve are dropped along
    with self-loops. Connection counts cover every deduplicated relationship
    by label, while the isolated count covers surviving edges only.
    """

    name = "assemble_graph"

    def __init__(self, diagram_type: str = DEFAULT_DIAGRAM_TYPE) -> None:
        self.profile = get_diagram_profile(diagram_type)

    def assemble(
        self,
        concepts: list[str],
        relationships: list[Relationship],
        diagram_type: str | None = None,
    ) -> Graph:
        profile = get_diagram_profile(diagram_type) if diagram_type else self.profile
        index_of: dict[str, int] = {}
        for i, concept in enumerate(concepts):
            index_of.setdefault(concept, i)

        deduped = dedupe_relationships(relationships)
        surviving = [
            rel
            for rel in deduped
            if rel.source != rel.target and rel.source in index_of and rel.target in index_of
        ]
        dropped = len(relationships) - len(surviving)

        nodes = []
        for i, concept in enumerate(concepts):
            connections = sum(1 for rel in deduped if concept in (rel.source, rel.target))
            nodes.append(Node(
                id=f"node_{i}",
                label=concept,
                connections=connections,
                node_type=classify_node(profile, i, connections),
            ))

        touched: set[int] = set()
        edges = []
        for i, rel in enumerate(surviving):
            source_index = index_of[rel.source]
            target_index = index_of[rel.target]
            touched.update((source_index, target_index))
            edges.append(Edge(
                id=f"edge_{i}",
                source=f"node_{source_index}",
                target=f"node_{target_index}",
                source_index=source_index,
                target_index=target_index,
                label=rel.relation,
                original_label=rel.original_relation,
                source_label=rel.source,
                target_label=rel.target,
            ))

        isolated = len(concepts) - len(touched)

        if dropped:
            logger.debug("relationships_dropped", count=dropped)
        logger.info(
            "graph_assembled",
            diagram_type=profile.key,
            nodes=len(nodes),
            edges=len(edges),
            isolated=isolated,
        )
        return Graph(
            concepts=list(concepts),
            relationships=deduped,
            nodes=nodes,
            edges=edges,
            isolated_concepts=isolated,
        )

    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        writer = get_stream_writer()
        writer({"node": self.name, "status": "started"})

        graph = self.assemble(
            state["concepts"],
            state["relationships"],
            state["options"].diagram_type,
        )

        writer({"node": self.name, "status": "complete", "nodes": len(graph.nodes), "edges": len(graph.edges)})
        return {"graph": graph}
