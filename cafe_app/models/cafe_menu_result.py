from datetime import datetime
from cafe_app.extensions import db


class CafeMenuResult(db.Model):
    __tablename__ = "cafe_menu_results"

    id = db.Column(db.Integer, primary_key=True)
    menu_date = db.Column(db.Date, nullable=False, unique=True)
    winning_option_id = db.Column(db.Integer, db.ForeignKey("cafe_menu_options.id"), nullable=False)
    total_votes = db.Column(db.Integer, nullable=False, default=0)
    was_tie = db.Column(db.Boolean, nullable=False, default=False)
    decided_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    finalized_at = db.Column(db.DateTime, nullable=True)

    winning_option = db.relationship("CafeMenuOption")
    decider = db.relationship("User")


class CafeDecisionLog(db.Model):
    """Append-only trail of every finalization, including overwritten ones."""
    __tablename__ = "cafe_decision_log"

    id = db.Column(db.Integer, primary_key=True)
    menu_date = db.Column(db.Date, nullable=False, index=True)
    winning_option_id = db.Column(db.Integer, nullable=False)
    total_votes = db.Column(db.Integer, nullable=False, default=0)
    was_tie = db.Column(db.Boolean, nullable=False, default=False)
    decided_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    source = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
