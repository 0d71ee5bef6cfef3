from datetime import datetime
from cafe_app.extensions import db


class CafeVote(db.Model):
    __tablename__ = "cafe_votes"

    id = db.Column(db.Integer, primary_key=True)
    menu_date = db.Column(db.Date, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    option_id = db.Column(
        db.Integer,
        db.ForeignKey("cafe_menu_options.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    voted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # One live vote per user per day; the upsert in vote_service targets this
    __table_args__ = (
        db.UniqueConstraint('menu_date', 'user_id', name='uq_cafe_vote_date_user'),
    )
