"""
Semantic Agent - Answers open-ended questions from the closest matching unit.
"""

import logging
from typing import Optional

from .base_agent import BaseAgent
from ..exceptions import UpstreamServiceError
from ..models.records import Answer, Unit
from ..models.state import QueryState
from ..utils.helpers import format_number, format_price

logger = logging.getLogger(__name__)

INSUFFICIENT_INFORMATION = (
    "I don't have enough information to answer that question accurately. "
    "Could you please rephrase or ask about specific unit types or pricing?"
)


class SemanticAgent(BaseAgent):
    """
    Semantic Agent for general questions.

    Embeds the query, searches available units, and answers only when the
    best match clears the confidence threshold. The answer is composed by
    the chat model, grounded in that single unit.
    """

    def __init__(self, confidence_threshold: Optional[float] = None, top_k: Optional[int] = None, **services):
        super().__init__("semantic_agent", **services)
        self.confidence_threshold = (
            self._settings.CONFIDENCE_THRESHOLD if confidence_threshold is None else confidence_threshold
        )
        self.top_k = top_k or self._settings.SEARCH_TOP_K

    def process(self, state: QueryState) -> QueryState:
        """
        Answer a general query.

        Args:
            state: Current workflow state

        Returns:
            Updated state with answer, confidence and unit reference
        """
        answer = self.answer(state.get("query", ""))

        state["answer"] = answer.text
        state["confidence"] = answer.confidence
        state["unit_id"] = answer.unit_id

        return state

    def answer(self, query: str) -> Answer:
        """
        Search, gate and compose.

        Embedding and search failures propagate; composition failures fall
        back to a fixed template.

        Args:
            query: Broker's question

        Returns:
            Answer with the top similarity score as confidence, or confidence 0
        """
        vector = self.llm.embed(query)
        results = self.units.similarity_search(vector, top_k=self.top_k)

        if not results or results[0].score <= self.confidence_threshold:
            best = results[0].score if results else None
            logger.info(f"No confident match for query (best score: {best})")
            return Answer(text=INSUFFICIENT_INFORMATION, confidence=0.0)

        top = results[0]
        return Answer(
            text=self._compose(query, top.unit),
            confidence=min(top.score, 1.0),
            unit_id=top.unit.id,
        )

    def _compose(self, query: str, unit: Unit) -> str:
        """
        Compose a one-line answer grounded in a unit.

        Args:
            query: Broker's question
            unit: Best matching unit

        Returns:
            Model answer, or the template answer if generation fails
        """
        prompt = self.prompt("answer_composer_user").format(
            query=query,
            unit_type=unit.unit_type,
            bedrooms=format_number(unit.bedrooms),
            bathrooms=format_number(unit.bathrooms),
            sqft=format_number(unit.sqft),
            price=format_number(unit.price),
            description=unit.description,
        )

        try:
            return self.llm.complete(system_prompt=self.prompt("answer_composer"), prompt=prompt)
        except UpstreamServiceError as e:
            logger.warning(f"Answer composition failed, using template: {e}")
            return template_answer(unit)


def template_answer(unit: Unit) -> str:
    """
    Render a unit as a plain answer without the language model.

    Args:
        unit: Unit to describe

    Returns:
        e.g. '2BR unit - 2 bed, 2 bath, 1200 sqft. Price: $298,000. Spacious ...'
    """
    text = (
        f"{unit.unit_type} unit - {format_number(unit.bedrooms)} bed, "
        f"{format_number(unit.bathrooms)} bath, {format_number(unit.sqft)} sqft. "
        f"Price: ${format_price(unit.price)}."
    )
    if unit.description:
        text = f"{text} {unit.description}"
    return text
