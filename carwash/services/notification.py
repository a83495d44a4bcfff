import re
from urllib.parse import quote

from carwash.models.booking import Booking, BookingStatus

STATUS_MESSAGES = {
    BookingStatus.PENDING: (
        "Status booking Anda saat ini adalah *Menunggu Konfirmasi*.\n"
        "Pembayaran Anda belum dikonfirmasi oleh admin.\n"
        "Silakan selesaikan pembayaran atau upload bukti transfer bila belum dilakukan. 🙏"
    ),
    BookingStatus.CONFIRMED: (
        "Booking Anda sudah *Terkonfirmasi*. ✅\n"
        "Mohon datang ke cabang sesuai jadwal yang dipilih. Terima kasih! 🙌"
    ),
    BookingStatus.PICKED_UP: (
        "Booking Anda sedang dalam proses *Penjemputan*. 🚗\n"
        "Tim kami sedang menuju lokasi Anda."
    ),
    BookingStatus.IN_PROGRESS: (
        "Booking Anda sedang dalam proses *Pengerjaan*. 🧽\n"
        "Tim kami saat ini sedang membersihkan kendaraan Anda."
    ),
    BookingStatus.COMPLETED: (
        "Proses pembersihan kendaraan Anda sudah *Selesai*! 🎉\n"
        "Terima kasih telah mempercayakan layanan kami. Semoga puas dan sampai jumpa lagi! 🙏"
    ),
    BookingStatus.CANCELLED: (
        "Mohon maaf, booking Anda telah *Dibatalkan*. ❌\n"
        "Jika pembatalan ini tidak sesuai, silakan hubungi admin kami untuk bantuan lebih lanjut."
    ),
}

FALLBACK_MESSAGE = "Update status booking Anda saat ini belum tersedia."

def whatsapp_phone(phone: str) -> str:
    """Digits only, with a leading 0 swapped for the 62 country code"""
    digits = re.sub(r'\D', '', phone or "")
    return f"62{digits[1:]}" if digits.startswith("0") else digits

def build_whatsapp_message(booking: Booking) -> str:
    service_name = booking.service.name if booking.service else "-"
    branch_name = booking.branch.name if booking.branch else "-"
    base_info = (
        f"Halo {booking.customer_name}, 👋\n\n"
        f"📌 Kode Booking: {booking.booking_code}\n"
        f"🛠 Layanan: {service_name}\n"
        f"📅 Jadwal: {booking.booking_date} pukul {booking.booking_time}\n"
        f"🚗 Kendaraan: {booking.vehicle_plate_number or '-'}\n"
        f"🏢 Cabang: {branch_name}\n"
    )
    return f"{base_info}\n{STATUS_MESSAGES.get(booking.status, FALLBACK_MESSAGE)}"

def build_whatsapp_link(booking: Booking) -> dict:
    phone = whatsapp_phone(booking.customer_phone)
    message = build_whatsapp_message(booking)
    return {
        "phone": phone,
        "message": message,
        "url": f"https://wa.me/{phone}?text={quote(message, safe='')}",
    }
