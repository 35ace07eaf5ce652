from datetime import datetime

from backoffice.extensions import db


class Module(db.Model):
    """Per-integration settings row (e.g. ``fraud-check``, ``steadfast-courier``)."""

    __tablename__ = "modules"

    id = db.Column(db.Integer, primary_key=True)

    module_id = db.Column(db.String(64), nullable=False, unique=True, index=True)
    name = db.Column(db.String(120), nullable=False, default="")
    enabled = db.Column(db.Boolean, nullable=False, default=False)

    # {"apiKey": ..., "secretKey": ..., "baseUrl": ...}
    settings = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        # Secrets are reported as present/absent only
        settings = self.settings or {}
        return {
            "module_id": self.module_id,
            "name": self.name or "",
            "enabled": bool(self.enabled),
            "configured": {k: bool(v) for k, v in settings.items()},
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
