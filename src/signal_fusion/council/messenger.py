"""Final messenger — reduce opinions to a consensus and a verdict, bundle the output."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from signal_fusion import __version__
from signal_fusion.models.council import Consensus, CouncilOpinion
from signal_fusion.models.edge import EdgeCalculation, TradeSetup, Urgency
from signal_fusion.models.output import (
    CouncilRound,
    FinalVerdict,
    OutputMetadata,
    Recommendation,
    SignalFusionOutput,
    SignalSwarm,
    TradingCouncil,
)
from signal_fusion.models.signal import Signal

MINORITY_SHARE = 0.2
TOP_N = 3


def _first_unique(items: Sequence[str], limit: int | None = TOP_N) -> list[str]:
    return list(dict.fromkeys(items))[:limit]


class FinalMessenger:
    @staticmethod
    def calculate_consensus(opinions: Sequence[CouncilOpinion]) -> Consensus:
        """Confidence-weighted vote across stances.

        The score is the winning share. Ties (and an empty or zero-confidence
        council) resolve to neutral. The opposite extreme is reported as the
        minority when its share exceeds 0.2.
        """
        total = sum(o.confidence for o in opinions)
        if not opinions or total == 0:
            return Consensus(score=0.5, majority="neutral")

        shares = {"bullish": 0.0, "bearish": 0.0, "neutral": 0.0}
        for o in opinions:
            shares[o.stance] += o.confidence / total
        bull, bear, neutral = shares["bullish"], shares["bearish"], shares["neutral"]

        if bull > bear and bull > neutral:
            majority = "bullish"
        elif bear > bull and bear > neutral:
            majority = "bearish"
        else:
            majority = "neutral"

        minority = None
        if majority == "bullish" and bear > MINORITY_SHARE:
            minority = "bearish"
        elif majority == "bearish" and bull > MINORITY_SHARE:
            minority = "bullish"

        return Consensus(
            score=max(shares.values()),
            majority=majority,
            minority=minority,
            bullish_share=bull,
            bearish_share=bear,
            neutral_share=neutral,
        )

    def determine_verdict(
        self,
        edge: EdgeCalculation,
        consensus: Consensus,
        opinions: Sequence[CouncilOpinion],
    ) -> FinalVerdict:
        recommendation: Recommendation
        if edge.expected_value > 2 and consensus.majority == "bullish":
            recommendation = "buy"
        elif edge.expected_value < 0 and consensus.majority == "bearish":
            recommendation = "sell"
        elif edge.conviction_score < 3 or consensus.score < 0.4:
            recommendation = "avoid"
        else:
            recommendation = "hold"

        urgency: Urgency = "patient"
        if recommendation == "buy":
            if edge.half_life < 6:
                urgency = "immediate"
            elif edge.half_life < 24:
                urgency = "soon"

        concerns = [c for o in opinions for c in o.concerns]
        key_points = [p for o in opinions for p in o.key_points]
        return FinalVerdict(
            recommendation=recommendation,
            conviction=min(100.0, (edge.conviction_score / 10) * consensus.score * 100),
            urgency=urgency,
            summary=self._summary(recommendation, edge, consensus, concerns),
            key_risks=_first_unique(concerns),
            key_opportunities=_first_unique(key_points),
        )

    @staticmethod
    def _summary(
        recommendation: str,
        edge: EdgeCalculation,
        consensus: Consensus,
        concerns: Sequence[str],
    ) -> str:
        parts = [
            recommendation.upper(),
            f"{edge.win_rate * 100:.0f}% win rate",
            f"{edge.expected_value:+.2f}% EV",
        ]
        if consensus.score > 0.7:
            parts.append("Strong council consensus")
        elif consensus.score < 0.5:
            parts.append("Mixed council opinions")
        if concerns:
            parts.append(f"Main concern: {concerns[0]}")
        return ". ".join(parts)

    def synthesize(
        self,
        query: str,
        signals: Sequence[Signal],
        edge: EdgeCalculation,
        trade_setup: TradeSetup,
        opinions: Sequence[CouncilOpinion],
        processing_time_ms: float,
        now: datetime | None = None,
    ) -> SignalFusionOutput:
        """Assemble the channel-agnostic output bundle. One debate round."""
        consensus = self.calculate_consensus(opinions)
        verdict = self.determine_verdict(edge, consensus, opinions)
        return SignalFusionOutput(
            query=query,
            timestamp=now or datetime.now(timezone.utc),
            signal_swarm=SignalSwarm(edge=edge, signals=list(signals), trade_setup=trade_setup),
            trading_council=TradingCouncil(
                debate=[
                    CouncilRound(round=1, opinions=list(opinions), consensus=consensus.score)
                ],
                consensus=consensus.score,
                majority_opinion=consensus.majority,
                minority_opinion=consensus.minority,
            ),
            final_verdict=verdict,
            metadata=OutputMetadata(
                processing_time_ms=processing_time_ms,
                data_sources=_first_unique([s.metadata.source for s in signals], limit=None),
                version=__version__,
            ),
        )
