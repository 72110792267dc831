"""Diagram profiles — extraction styles that shape prompts and node roles."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DIAGRAM_TYPE = "mindmap"


@dataclass(frozen=True)
class DiagramProfile:
    key: str
    name: str
    node_types: tuple[str, ...]
    extraction_focus: str
    extraction_context: str
    relationship_context: str
    preferred_relations: tuple[str, ...]
    structure: str


DIAGRAM_PROFILES: dict[str, DiagramProfile] = {
    "mindmap": DiagramProfile(
        key="mindmap",
        name="Mind Map",
        node_types=("central", "branch", "leaf"),
        extraction_focus="hierarchical concepts and sub-topics",
        extraction_context=(
            "You are a mind map concept extraction agent. Extract key concepts that can be "
            "organized hierarchically from the center outward.\n"
            "Focus on: main topics, subtopics, related ideas, and supporting details."
        ),
        relationship_context="Mind Map - showing how ideas branch out from central concepts",
        preferred_relations=("contains", "includes", "relates to", "has", "aspect of", "example of", "leads to"),
        structure="Create hierarchical branching relationships from central to peripheral concepts",
    ),
    "flowchart": DiagramProfile(
        key="flowchart",
        name="Flowchart",
        node_types=("start", "process", "decision", "end"),
        extraction_focus="processes, steps, decisions, and outcomes",
        extraction_context=(
            "You are a flowchart extraction agent. Extract steps, processes, decisions, and "
            "outcomes from the text.\n"
            "Focus on: sequential steps, decision points, start/end states, and process flows."
        ),
        relationship_context="Flowchart - showing process flows and decision paths",
        preferred_relations=("then", "if yes", "if no", "leads to", "causes", "triggers", "starts", "ends"),
        structure="Create sequential flow relationships, especially for decisions and outcomes",
    ),
    "network": DiagramProfile(
        key="network",
        name="Network Diagram",
        node_types=("hub", "node", "endpoint"),
        extraction_focus="entities and their interconnections",
        extraction_context=(
            "You are a network diagram extraction agent. Extract entities and their "
            "interconnections.\n"
            "Focus on: key entities, hubs (highly connected entities), and clusters."
        ),
        relationship_context="Network Diagram - showing interconnections between entities",
        preferred_relations=("connects", "links", "interacts", "communicates", "depends on", "shares", "accesses"),
        structure="Create connections between related entities, favoring hubs",
    ),
    "tree": DiagramProfile(
        key="tree",
        name="Tree Diagram",
        node_types=("root", "parent", "child", "leaf"),
        extraction_focus="parent-child relationships and categories",
        extraction_context=(
            "You are a tree diagram extraction agent. Extract hierarchical parent-child "
            "relationships.\n"
            "Focus on: categories, subcategories, classifications, and nested structures."
        ),
        relationship_context="Tree Diagram - showing parent-child hierarchies",
        preferred_relations=("parent of", "child of", "contains", "belongs to", "categorized as", "type of", "subset"),
        structure="Create strict parent-child relationships forming a tree structure",
    ),
    "orgchart": DiagramProfile(
        key="orgchart",
        name="Organization Chart",
        node_types=("executive", "manager", "team", "member"),
        extraction_focus="roles, positions, and reporting structures",
        extraction_context=(
            "You are an organization chart extraction agent. Extract roles, positions, and "
            "reporting structures.\n"
            "Focus on: job titles, departments, teams, and reporting relationships."
        ),
        relationship_context="Organization Chart - showing reporting structures",
        preferred_relations=("reports to", "manages", "leads", "part of", "oversees", "works in", "member of"),
        structure="Create hierarchical reporting relationships (who reports to whom)",
    ),
    "block": DiagramProfile(
        key="block",
        name="Block Diagram",
        node_types=("system", "component", "module", "interface"),
        extraction_focus="components, modules, and their interfaces",
        extraction_context=(
            "You are a block diagram extraction agent. Extract system components, modules, "
            "and their interfaces.\n"
            "Focus on: systems, subsystems, components, modules, and interfaces."
        ),
        relationship_context="Block Diagram - showing system component connections",
        preferred_relations=("feeds", "outputs to", "inputs from", "controls", "interfaces", "contains", "uses"),
        structure="Create component interface relationships showing data/signal flow",
    ),
}


def get_diagram_profile(diagram_type: str | None) -> DiagramProfile:
    """Return the profile for ``diagram_type``, falling back to the mind map."""
    return DIAGRAM_PROFILES.get(diagram_type or DEFAULT_DIAGRAM_TYPE, DIAGRAM_PROFILES[DEFAULT_DIAGRAM_TYPE])
