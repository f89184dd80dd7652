import argparse
import json
import sys
from pathlib import Path

from fastapi.encoders import jsonable_encoder

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dashmetrics.services import metrics
from dashmetrics.services.period import resolve_period

REPORTS = {
    "funnel": metrics.funnel_stats,
    "growth": metrics.growth_stats,
    "quality": metrics.quality_stats,
    "messaging": metrics.messaging_stats,
    "referrals": metrics.referral_stats,
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Print dashboard metrics for a period as JSON")
    parser.add_argument("report", choices=sorted(REPORTS))
    parser.add_argument("--period", default="all", help="1, 7, 30, 90 or all")
    args = parser.parse_args()

    period = resolve_period(args.period)
    print(json.dumps(jsonable_encoder(REPORTS[args.report](period)), indent=2))


if __name__ == "__main__":
    main()
