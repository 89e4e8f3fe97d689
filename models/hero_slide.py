from . import db
from datetime import datetime, timezone

DISPLAY_TYPES = ('fullscreen', 'banner', 'carousel')
TEXT_ALIGNMENTS = ('left', 'center', 'right')


class HeroSlide(db.Model):
    __tablename__ = 'hero_slides'

    id = db.Column(db.Integer, primary_key=True)
    business_unit_id = db.Column(db.String(40), db.ForeignKey('business_units.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    subtitle = db.Column(db.String(300), nullable=True)
    description = db.Column(db.Text, nullable=True)
    background_image = db.Column(db.String(255), nullable=True)
    background_video = db.Column(db.String(255), nullable=True)
    alt_text = db.Column(db.String(200), nullable=True)
    display_type = db.Column(db.String(20), default='fullscreen')
    text_alignment = db.Column(db.String(10), default='center')
    overlay_color = db.Column(db.String(20), nullable=True)
    overlay_opacity = db.Column(db.Float, default=0.3)
    text_color = db.Column(db.String(20), nullable=True)
    primary_button_text = db.Column(db.String(60), nullable=True)
    primary_button_url = db.Column(db.String(255), nullable=True)
    secondary_button_text = db.Column(db.String(60), nullable=True)
    secondary_button_url = db.Column(db.String(255), nullable=True)
    show_from = db.Column(db.Date, nullable=True)
    show_until = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    is_featured = db.Column(db.Boolean, default=False)
    sort_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<HeroSlide {self.title}>'
