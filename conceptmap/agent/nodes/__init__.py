"""Pipeline node implementations — all extend BaseAgent subclasses."""

from __future__ import annotations

from conceptmap.agent.nodes.concept_extractor import ConceptExtractorAgent
from conceptmap.agent.nodes.graph_assembler import GraphAssembler
from conceptmap.agent.nodes.refiner import RefinementAgent
from conceptmap.agent.nodes.relationship_extractor import RelationshipExtractorAgent
from conceptmap.agent.nodes.simplifier import SimplificationAgent
from conceptmap.agent.nodes.validator import ContentValidator

__all__ = [
    "ConceptExtractorAgent",
    "ContentValidator",
    "GraphAssembler",
    "RefinementAgent",
    "RelationshipExtractorAgent",
    "SimplificationAgent",
]
