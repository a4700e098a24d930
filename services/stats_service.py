from collections import Counter
from sqlalchemy.orm import Session
from queries import get_detections_for_user


def get_stats_service(user_id: int, db: Session):
    # one query, so every figure describes the same set of rows
    rows = get_detections_for_user(db, user_id)
    total = len(rows)

    confidences = [row.confidence for row in rows]
    compliant = sum(1 for row in rows if row.is_compliant)

    avg_confidence = round(sum(confidences) / len(confidences), 4) if confidences else 0.0
    compliance_rate = round(compliant / total, 4) if total else 0.0

    return {
        "total_detections": total,
        "compliant_count": compliant,
        "compliance_rate": compliance_rate,
        "average_confidence": avg_confidence,
        "label_counts": dict(Counter(row.label for row in rows)),
    }
