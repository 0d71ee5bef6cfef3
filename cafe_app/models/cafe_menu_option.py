from datetime import datetime
from cafe_app.extensions import db


class CafeMenuOption(db.Model):
    __tablename__ = "cafe_menu_options"

    id = db.Column(db.Integer, primary_key=True)
    menu_date = db.Column(db.Date, nullable=False, index=True)
    option_number = db.Column(db.Integer, nullable=False)  # 1..3
    dish_name = db.Column(db.String(200), nullable=False)
    dish_name_ar = db.Column(db.String(200), nullable=True)
    description = db.Column(db.String(500), nullable=True)
    description_ar = db.Column(db.String(500), nullable=True)
    image_path = db.Column(db.String(500), nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('menu_date', 'option_number', name='uq_cafe_option_date_number'),
        # Ids of replaced options are never handed out again
        {"sqlite_autoincrement": True},
    )

    def to_dict(self, vote_count=None):
        data = {
            "id": self.id,
            "menu_date": self.menu_date.isoformat(),
            "option_number": self.option_number,
            "dish_name": self.dish_name,
            "dish_name_ar": self.dish_name_ar,
            "description": self.description,
            "description_ar": self.description_ar,
            "image_path": self.image_path,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if vote_count is not None:
            data["vote_count"] = int(vote_count)
        return data
