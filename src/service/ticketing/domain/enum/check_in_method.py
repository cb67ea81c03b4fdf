from enum import StrEnum


class CheckInMethod(StrEnum):
    QR_CODE = 'qr_code'
    GUEST_LIST = 'guest_list'
    MANUAL = 'manual'  # token typed in by staff when the scanner fails
