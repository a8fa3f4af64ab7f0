"""
Advisor Service - natural language redemption advice over explore results.

This service bridges:
1. Engine ground truth (accessible programs, opportunities, affordability)
2. LLM prompt engineering
3. Template fallback (for offline/API-less scenarios)

Architectural Decisions:
- Engine-first: every number in the prompt comes from the award engine
- Graceful degradation: falls back to templates if the LLM is unavailable
- Type-safe: Pydantic schemas throughout
"""

import hashlib
import logging
import os
import re
import time
from datetime import datetime, timezone
from typing import List, Optional

from openai import APIError, APITimeoutError, OpenAI

from app.schemas.ai_schemas import (
    AdviceContext,
    AdviceRequest,
    AdviceResponse,
    AuditLogEntry,
    BalanceLine,
    OpportunityLine,
    Recommendation,
)
from engine.catalog import Catalog
from engine.models import PointBalance
from engine.opportunities import get_award_opportunities, normalize_destination

logger = logging.getLogger(__name__)


# =============================================================================
# LLM Configuration
# =============================================================================

class LLMConfig:
    """Centralized LLM settings with environment variable overrides"""
    MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")

    _default_temperature = 0.7
    try:
        TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", str(_default_temperature)))
    except (TypeError, ValueError):
        logger.warning(
            "Invalid LLM_TEMPERATURE value; falling back to default %s",
            _default_temperature,
        )
        TEMPERATURE = _default_temperature

    _default_max_tokens = 800
    try:
        MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", str(_default_max_tokens)))
    except (TypeError, ValueError):
        logger.warning(
            "Invalid LLM_MAX_TOKENS value; falling back to default %s",
            _default_max_tokens,
        )
        MAX_TOKENS = _default_max_tokens

    _default_timeout = 10
    try:
        TIMEOUT_SECONDS = int(os.getenv("LLM_TIMEOUT", str(_default_timeout)))
    except (TypeError, ValueError):
        logger.warning(
            "Invalid LLM_TIMEOUT value; falling back to default %s seconds",
            _default_timeout,
        )
        TIMEOUT_SECONDS = _default_timeout

    _default_max_retries = 1
    try:
        MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", str(_default_max_retries)))
    except (TypeError, ValueError):
        logger.warning(
            "Invalid LLM_MAX_RETRIES value; falling back to default %s",
            _default_max_retries,
        )
        MAX_RETRIES = _default_max_retries


# Initialize OpenAI client (only if API key present)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
openai_client = None

if OPENAI_API_KEY:
    try:
        openai_client = OpenAI(
            api_key=OPENAI_API_KEY,
            timeout=float(LLMConfig.TIMEOUT_SECONDS),
            max_retries=LLMConfig.MAX_RETRIES,
        )
        logger.info("OpenAI client initialized with model: %s", LLMConfig.MODEL)
    except Exception as e:
        logger.warning("Failed to initialize OpenAI client: %s. Will use fallback mode.", e)
else:
    logger.warning(
        "OPENAI_API_KEY not set. Advisor service will use template fallbacks. "
        "Set the environment variable to enable AI-powered advice."
    )


SYSTEM_PROMPT = """You are an expert travel rewards advisor helping users understand what they can do with their points and miles.

You have deep knowledge of:
- All major airline loyalty programs and their sweet spots
- Credit card transfer partners (Chase UR, Amex MR, Citi TYP, Capital One, Bilt)
- Best value redemptions for different regions
- Points valuations and when to save vs spend

Your goal is to give personalized, actionable advice based on the user's specific point balances and travel goals."""

PROMPT_OPPORTUNITY_LIMIT = 5
MAX_RECOMMENDATIONS = 3

_LIST_ITEM = re.compile(r"^(\d+\.|[-•])\s*")


# =============================================================================
# Advisor Service
# =============================================================================

class AdvisorService:
    """
    Generates redemption advice for a balance snapshot.

    Usage:
        service = AdvisorService(catalog)
        response = service.generate_advice(AdviceRequest(balances=[...], destination="Japan"))
    """

    def __init__(self, catalog: Catalog, config: Optional[dict] = None):
        self.catalog = catalog
        self.config = config

    def build_context(self, request: AdviceRequest) -> AdviceContext:
        """Run the engine and keep only the facts the prompt needs."""
        snapshot = [PointBalance(b.program_id, b.balance) for b in request.balances]
        destination = normalize_destination(request.destination) or None
        opportunities = get_award_opportunities(snapshot, destination, self.catalog, self.config)

        balances = []
        for b in snapshot:
            program = self.catalog.get_program(b.program_id)
            balances.append(
                BalanceLine(
                    program_id=b.program_id,
                    program_name=program.name if program else b.program_id,
                    balance=b.balance,
                )
            )

        return AdviceContext(
            balances=balances,
            destination=destination,
            opportunities=[
                OpportunityLine(
                    title=o.sweet_spot.title,
                    points_required=o.points_required,
                    value_cpp=o.sweet_spot.value_cpp,
                    can_afford=o.can_afford,
                    points_shortfall=o.points_shortfall,
                )
                for o in opportunities
            ],
        )

    def generate_advice(self, request: AdviceRequest, user_id: Optional[str] = None) -> AdviceResponse:
        """
        Flow:
        1. Build context from the engine
        2. Build prompt
        3. Attempt LLM call (if API key available)
        4. Fallback to templates if the LLM fails
        5. Log an audit entry
        """
        start_time = time.time()
        context = self.build_context(request)
        prompt = self.build_prompt(context)

        text, model_used, is_fallback = self._try_llm_generation(prompt, context)

        summary = text
        if is_fallback:
            recommendations = self._template_recommendations(context.destination)
        else:
            recommendations = parse_recommendations(text) or self._template_recommendations(context.destination)

        response = AdviceResponse(
            summary=summary,
            recommendations=recommendations,
            model_used=model_used,
            is_fallback=is_fallback,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )

        audit = self.create_audit_log(response, context, user_id, prompt)
        logger.info("Advice audit: %s", audit.model_dump_json())
        return response

    def build_prompt(self, context: AdviceContext) -> str:
        prompt = "Analyze this user's points portfolio and help them understand their options:\n\n"

        prompt += "USER'S POINTS BALANCES:\n"
        for b in context.balances:
            prompt += f"- {b.program_name}: {b.balance:,} points\n"
        prompt += "\n"

        if context.destination:
            prompt += f"DESIRED DESTINATION: {context.destination}\n\n"

        if context.opportunities:
            prompt += "AVAILABLE REDEMPTION OPTIONS:\n"
            for o in context.opportunities[:PROMPT_OPPORTUNITY_LIMIT]:
                status = "CAN AFFORD" if o.can_afford else "needs more points"
                prompt += f"- {o.title}: {o.points_required:,} points ({o.value_cpp} cpp) - {status}\n"
            prompt += "\n"

        goal = f" to get to {context.destination}" if context.destination else ""
        prompt += (
            "Please provide:\n"
            f"1. A brief summary (2-3 sentences) of what the user can do with their points{goal}\n"
            "2. Their best option if they can afford something now\n"
            "3. If they can't afford their goal, how many more points they need and how to get them\n\n"
            "Keep the response concise and actionable. Focus on their specific situation."
        )
        return prompt

    def _try_llm_generation(self, prompt: str, context: AdviceContext) -> tuple[str, str, bool]:
        """
        Attempt LLM call with graceful fallback to template.

        Returns:
            Tuple of (text, model_used, is_fallback)
        """
        if not openai_client:
            logger.debug("OpenAI client not available, using template fallback")
            return self._template_summary(context), "template", True

        try:
            response = openai_client.chat.completions.create(
                model=LLMConfig.MODEL,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=LLMConfig.TEMPERATURE,
                max_tokens=LLMConfig.MAX_TOKENS,
            )

            text = (response.choices[0].message.content or "").strip()
            if not text:
                logger.warning("LLM returned empty advice, using template fallback")
                return self._template_summary(context), "template_empty", True
            logger.info("LLM advice generated successfully (model: %s)", LLMConfig.MODEL)
            return text, LLMConfig.MODEL, False

        except APITimeoutError:
            logger.warning("OpenAI API timeout after %ss, using fallback", LLMConfig.TIMEOUT_SECONDS)
            return self._template_summary(context), "template_timeout", True

        except APIError as e:
            logger.error("OpenAI API error: %s, using fallback", e)
            return self._template_summary(context), "template_error", True

        except Exception as e:
            logger.error("Unexpected error during LLM generation: %s, using fallback", e)
            return self._template_summary(context), "template_exception", True

    def _template_summary(self, context: AdviceContext) -> str:
        total = context.total_points
        affordable = context.affordable_count
        destination = context.destination

        if affordable > 0:
            target = f" to {destination}" if destination else ""
            return (
                f"Great news! With your {total:,} total points, you have {affordable} award "
                f"flights you can book{target} right now. Check the opportunities below to see "
                f"your best options sorted by value."
            )

        lead = (
            f"While you may not have enough for premium {destination} flights yet, "
            if destination else ""
        )
        return (
            f"You have {total:,} points across your programs. {lead}consider building your "
            f"balances through credit card bonuses or look for economy sweet spots that "
            f"require fewer points."
        )

    def _template_recommendations(self, destination: Optional[str]) -> List[Recommendation]:
        lowered = (destination or "").lower()

        if "japan" in lowered or "asia" in lowered:
            return [
                Recommendation(
                    title="Best Option for Japan",
                    description=(
                        "Transfer Chase UR or Amex MR to Virgin Atlantic and book ANA business/first "
                        "class. This is one of the best value redemptions to Japan."
                    ),
                ),
                Recommendation(
                    title="Alternative Route",
                    description=(
                        "Consider Alaska Mileage Plan for Cathay Pacific or Japan Airlines business "
                        "class at excellent rates."
                    ),
                ),
            ]

        if "europe" in lowered:
            return [
                Recommendation(
                    title="Best Option for Europe",
                    description=(
                        "Flying Blue Promo Rewards offers 25-50% off monthly to select destinations. "
                        "Aeroplan is also great for Star Alliance partners."
                    ),
                ),
                Recommendation(
                    title="Premium Cabin Tip",
                    description=(
                        "For business class, look at Lufthansa First via LifeMiles or Lufthansa "
                        "business via Aeroplan for excellent value."
                    ),
                ),
            ]

        return [
            Recommendation(
                title="Maximize Your Points",
                description=(
                    "Transfer credit card points to airline partners for 30-50% more value than "
                    "portal bookings. Business class awards offer the best cents-per-point value."
                ),
            ),
            Recommendation(
                title="Build Your Balance",
                description=(
                    "Focus on signup bonuses and category spending to grow your points. Chase and "
                    "Amex cards offer the most flexible transfer options."
                ),
            ),
        ]

    def create_audit_log(
        self,
        response: AdviceResponse,
        context: AdviceContext,
        user_id: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> AuditLogEntry:
        prompt_hash = None
        if prompt:
            prompt_hash = hashlib.sha256(prompt.encode()).hexdigest()[:16]

        return AuditLogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            user_id=user_id,
            destination=context.destination,
            opportunity_count=min(len(context.opportunities), PROMPT_OPPORTUNITY_LIMIT),
            model_used=response.model_used,
            prompt_hash=prompt_hash,
            response_length=len(response.summary),
        )


def parse_recommendations(text: str) -> List[Recommendation]:
    """
    Pull up to three titled items out of a free-form LLM answer.

    Numbered or bulleted lines start a new item; "Title: description" lines
    are split on the first colon. Continuation lines extend the description.
    """
    items: List[Recommendation] = []
    title = ""
    description = ""

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        if _LIST_ITEM.match(line):
            if title:
                items.append(Recommendation(title=title, description=description.strip()))
            cleaned = _LIST_ITEM.sub("", line, count=1).strip()
            head, sep, tail = cleaned.partition(":")
            if sep:
                title = head.replace("**", "").strip()
                description = tail.lstrip("*").strip()
            else:
                title = cleaned[:50]
                description = cleaned
        elif title:
            description += " " + line

    if title:
        items.append(Recommendation(title=title, description=description.strip()))

    return items[:MAX_RECOMMENDATIONS]
