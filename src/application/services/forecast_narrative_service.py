"""Narrative summaries for forecast runs.

Builds the analyst prompt from the forecast results and calls the injected
text generation service. Narrative failures never fail a run: any error or
empty answer is replaced by a fixed fallback text.
"""

from collections.abc import Sequence

from src.common.logging import get_logger
from src.domain.entities.forecast_result import ForecastResult
from src.domain.entities.swing_region import SwingRegion
from src.domain.services.interfaces.narrative_generation_service import (
    INarrativeGenerationService,
)
from src.domain.value_objects.forecast_scenario import ForecastScenario


logger = get_logger(__name__)

TOP_PARTIES_IN_PROMPT = 5
TOP_REGIONS_IN_PROMPT = 3

NARRATIVE_UNAVAILABLE = "Análise não disponível."
NARRATIVE_FALLBACK = (
    "Não foi possível gerar análise narrativa. "
    "Por favor, consulte os dados quantitativos."
)

ANALYST_SYSTEM_PROMPT = """\
Você é um analista político especializado em eleições brasileiras.
IMPORTANTE: Responda SEMPRE em português brasileiro. Nunca use inglês.
Forneça uma análise concisa e objetiva das previsões eleitorais, \
destacando tendências, riscos e oportunidades."""

FORECAST_PROMPT_TEMPLATE = """\
Baseado nos seguintes dados de previsão para o ano {target_year}, \
gere uma análise narrativa concisa (3-4 parágrafos):

Previsões por Partido (top {party_count}):
{party_lines}

Regiões Voláteis (swing regions):
{region_lines}

Cargo: {position}
Estado: {state}

Forneça insights sobre:
1. Cenário competitivo geral
2. Principais riscos e incertezas
3. Regiões decisivas para o resultado
4. Recomendações estratégicas
"""


def _party_line(result: ForecastResult) -> str:
    return (
        f"- {result.entity_name}: {result.predicted_vote_share:.1f}% "
        f"(IC: {result.vote_share_lower:.1f}% - {result.vote_share_upper:.1f}%), "
        f"Tendência: {result.trend_direction}"
    )


def _region_line(region: SwingRegion) -> str:
    return (
        f"- {region.region_name}: Margem {region.margin_percent:.2f}% entre "
        f"{region.leading_entity} e {region.challenging_entity}, "
        f"Volatilidade: {region.volatility_score:.4f}"
    )


class ForecastNarrativeService:
    """Generates the narrative text attached to a forecast run."""

    def __init__(self, narrative_service: INarrativeGenerationService) -> None:
        self._narrative_service = narrative_service

    def build_forecast_prompt(
        self,
        target_year: int,
        party_results: Sequence[ForecastResult],
        swing_regions: Sequence[SwingRegion],
        target_position: str | None = None,
        target_state: str | None = None,
    ) -> str:
        """Build the prompt for a regular forecast run."""
        top_parties = party_results[:TOP_PARTIES_IN_PROMPT]
        top_regions = swing_regions[:TOP_REGIONS_IN_PROMPT]
        return FORECAST_PROMPT_TEMPLATE.format(
            target_year=target_year,
            party_count=TOP_PARTIES_IN_PROMPT,
            party_lines="\n".join(_party_line(p) for p in top_parties),
            region_lines="\n".join(_region_line(r) for r in top_regions),
            position=target_position or "Geral",
            state=target_state or "Nacional",
        )

    def build_scenario_prompt(
        self,
        scenario: ForecastScenario,
        party_results: Sequence[ForecastResult],
    ) -> str:
        """Build the prompt for a scenario forecast."""
        parts = [
            f"Análise de previsão eleitoral para {scenario.target_year}:",
            f"Cenário: {scenario.name}",
            f"Baseado em dados históricos de {scenario.base_year}",
            f"Estado: {scenario.state}" if scenario.state else "Âmbito Nacional",
            "",
            "Partidos principais previstos:",
        ]
        for i, p in enumerate(party_results[:TOP_PARTIES_IN_PROMPT], 1):
            parts.append(
                f"{i}. {p.entity_name}: {p.predicted_vote_share:.1f}% "
                f"(IC: {p.vote_share_lower:.1f}%-{p.vote_share_upper:.1f}%)"
            )
        if scenario.polling_data:
            parts += ["", "Dados de pesquisas incorporados:"]
            parts += [
                f"- {poll.party}: {poll.poll_percent}% ({poll.source or 'pesquisa'})"
                for poll in scenario.polling_data
            ]
        if scenario.external_factors:
            parts += ["", "Fatores externos considerados:"]
            parts += [
                f"- {f.factor}: impacto {f.impact} (magnitude {f.magnitude}/10)"
                for f in scenario.external_factors
            ]
        parts += [
            "",
            "Gere uma análise narrativa de 2-3 parágrafos sobre estas previsões, "
            "considerando o contexto histórico e os fatores incorporados no cenário.",
        ]
        return "\n".join(parts)

    @staticmethod
    def scenario_fallback(
        scenario: ForecastScenario, party_results: Sequence[ForecastResult]
    ) -> str:
        top = ", ".join(
            f"{p.entity_name} ({p.predicted_vote_share:.1f}%)" for p in party_results[:3]
        )
        return (
            f'Previsão para {scenario.target_year} baseada no cenário "{scenario.name}". '
            f"Top 3 partidos: {top}."
        )

    async def generate(
        self,
        prompt: str,
        fallback: str = NARRATIVE_FALLBACK,
        empty_fallback: str = NARRATIVE_UNAVAILABLE,
    ) -> str:
        """Call the narrative service, never raising.

        Args:
            prompt: Prompt to send
            fallback: Text used when the service raises
            empty_fallback: Text used when the service returns nothing

        Returns:
            Generated narrative or a fallback text
        """
        try:
            text = await self._narrative_service.generate_narrative(
                prompt, system_prompt=ANALYST_SYSTEM_PROMPT
            )
        except Exception:
            logger.exception("Narrative generation failed, using fallback")
            return fallback

        if not text or not text.strip():
            logger.warning("Narrative generation returned empty content")
            return empty_fallback
        return text.strip()

    async def generate_forecast_narrative(
        self,
        target_year: int,
        party_results: Sequence[ForecastResult],
        swing_regions: Sequence[SwingRegion],
        target_position: str | None = None,
        target_state: str | None = None,
    ) -> str:
        prompt = self.build_forecast_prompt(
            target_year, party_results, swing_regions, target_position, target_state
        )
        return await self.generate(prompt)

    async def generate_scenario_narrative(
        self,
        scenario: ForecastScenario,
        party_results: Sequence[ForecastResult],
    ) -> str:
        fallback = self.scenario_fallback(scenario, party_results)
        return await self.generate(
            self.build_scenario_prompt(scenario, party_results),
            fallback=fallback,
            empty_fallback=fallback,
        )
