from . import db
from datetime import datetime, timezone

PAYMENT_STATUS = {
    'PENDING': 'Pending',
    'PROCESSING': 'Processing',
    'SUCCEEDED': 'Succeeded',
    'FAILED': 'Failed',
    'CANCELLED': 'Cancelled',
    'REFUNDED': 'Refunded',
    'PARTIAL': 'Partially Refunded',
}

PAYMENT_METHODS = {
    'CASH': 'Cash',
    'CREDIT_CARD': 'Credit Card',
    'DEBIT_CARD': 'Debit Card',
    'BANK_TRANSFER': 'Bank Transfer',
    'ONLINE_BANKING': 'Online Banking',
    'GCASH': 'GCash',
    'PAYMAYA': 'PayMaya',
    'GRABPAY': 'GrabPay',
    'CHECK': 'Check',
    'OTHER': 'Other',
}


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    reservation_id = db.Column(db.Integer, db.ForeignKey('reservations.id'), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(3), nullable=False, default='PHP')
    status = db.Column(db.String(20), default='PENDING', nullable=False, index=True)
    method = db.Column(db.String(20), default='CASH', nullable=False)
    reference = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    processed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.CheckConstraint('amount > 0', name='ck_payment_amount_positive'),
    )

    @property
    def status_label(self):
        return PAYMENT_STATUS.get(self.status, self.status)

    @property
    def method_label(self):
        return PAYMENT_METHODS.get(self.method, self.method)

    def __repr__(self):
        return f'<Payment {self.id}: {self.amount} {self.currency} {self.status}>'
