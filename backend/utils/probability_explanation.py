"""
합격 확률 설명과 시뮬레이션
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from config import get_timezone
from models.profile import Profile
from models.study_log import StudyLog
from utils.aggregation import sum_minutes_since
from utils.date_utils import ensure_aware, get_study_day
from utils.probability import calculate_pass_probability

# 확률을 유지하려면 하루 최소 30분, 올리려면 2시간 권장
MAINTAIN_DAILY_MINUTES = 30
INCREASE_DAILY_MINUTES = 120

SIMULATION_DAYS = (1, 3, 7, 14)
HISTORY_PERIODS = (7, 30, 90, 180, 365)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(get_timezone())
    return ensure_aware(now).astimezone(get_timezone())


def calculate_required_daily_study(profile: Profile, study_logs: List[StudyLog],
                                   now: Optional[datetime] = None) -> Dict:
    """합격 확률 유지/향상에 필요한 하루 공부 시간 (분)"""
    now = _now(now)
    recent_7_days_minutes = sum_minutes_since(study_logs, now - timedelta(days=7))

    return {
        "to_maintain": MAINTAIN_DAILY_MINUTES,
        "to_increase": INCREASE_DAILY_MINUTES,
        "recent_7_days_minutes": recent_7_days_minutes,
    }


def calculate_probability_drop_without_study(profile: Profile, study_logs: List[StudyLog],
                                             latest_study_log: Optional[StudyLog],
                                             now: Optional[datetime] = None) -> Dict:
    """공부를 전혀 하지 않았을 때의 합격 확률 변화

    최신 기록의 날짜를 N일 전으로 옮겨 다시 계산합니다.
    현재 계산식은 공부 기록을 사용하지 않으므로 감소폭은 0 입니다.
    """
    now = _now(now)
    today = now.date()
    current = calculate_pass_probability(profile, today)["probability"]

    result = {"current_probability": current, "simulations": []}
    for days in SIMULATION_DAYS:
        simulated_latest = None
        if latest_study_log is not None:
            simulated_latest = latest_study_log.model_copy(
                update={"started_at": now - timedelta(days=days)}
            )
        after = calculate_pass_probability(profile, today)["probability"]
        result["simulations"].append({
            "days": days,
            "latest_study_at": simulated_latest.started_at if simulated_latest else None,
            "probability": after,
            "drop": max(0, current - after),
        })

    return result


def build_probability_history(profile: Profile, study_logs: List[StudyLog], days: int = 30,
                              now: Optional[datetime] = None) -> List[Dict]:
    """최근 days 일 동안의 일별 합격 확률 (첫 기록 이전 날짜는 제외)"""
    if not study_logs:
        return []

    now = _now(now)
    first_study_day = min(get_study_day(log.started_at) for log in study_logs)

    history = []
    for i in range(days - 1, -1, -1):
        day = now.date() - timedelta(days=i)
        if day.isoformat() < first_study_day:
            continue

        probability = calculate_pass_probability(profile, day)["probability"]
        history.append({
            "date": f"{day.month}/{day.day}",
            "full_date": day.isoformat(),
            "probability": probability,
        })

    return history
