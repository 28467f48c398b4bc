"""User-facing checkout messages."""

NO_PAYMENT_INFORMATION = 'No payment information found. Please select seats again.'
TIME_EXPIRED = 'Time expired. Please select seats again.'
SDK_NOT_READY = 'Payment system has not loaded yet. Please try again in a moment.'
PAYMENT_FAILED = 'Payment failed'
SEATS_ALREADY_LOCKED = 'Seats already locked by other users'
USER_NOT_AUTHENTICATED = 'User not authenticated'
