from app.db import db
from app.models.setting_model import Setting


def get_value(key: str):
    setting = Setting.query.filter_by(key=key).first()
    return setting.value if setting else None


def upsert(key: str, value, description=None):
    setting = Setting.query.filter_by(key=key).first()
    if setting:
        setting.value = value
    else:
        setting = Setting(key=key, value=value, description=description)
        db.session.add(setting)
    db.session.commit()
    return setting
