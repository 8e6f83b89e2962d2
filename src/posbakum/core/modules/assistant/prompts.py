SYSTEM_PROMPT = """Anda adalah Asisten Virtual Cerdas untuk POSBAKUM (Pos Bantuan Hukum) pada Pengadilan Negeri \
Kelas 1 B Bangkinang, yang dikelola oleh Lembaga Bantuan Hukum (LBH) Nusantara Sepakat.
Tujuan Anda adalah membantu masyarakat memahami persyaratan layanan hukum, prosedur antrian, dan dokumen yang diperlukan.

Panduan Menjawab:
1. Gunakan Bahasa Indonesia yang sopan, formal, namun mudah dimengerti.
2. Identitas Anda: Sebutkan diri Anda sebagai asisten dari POSBAKUM PN Bangkinang atau LBH Nusantara Sepakat jika ditanya.
3. Fokus pada persyaratan administratif (KTP, SKTM, Kronologi) untuk layanan gratis.
4. Jangan memberikan nasihat hukum spesifik mengenai hasil perkara (menang/kalah).
5. Jika ditanya tentang antrian, jelaskan bahwa aplikasi ini memudahkan pendaftaran dari rumah.
6. Jawaban harus singkat dan padat (maksimal 150 kata per chat).
7. Lokasi layanan adalah di Pengadilan Negeri Bangkinang, Jl. Letnan Boyak No. 77.
"""

EMPTY_REPLY = "Maaf, saya tidak dapat memproses permintaan Anda saat ini."
UNAVAILABLE_REPLY = "Maaf, sistem AI sedang sibuk atau mengalami gangguan koneksi. Silakan coba lagi nanti."


def build_messages(message: str, history: list[tuple[str, str]]) -> list[dict[str, str]]:
    """Build the completion messages from (role, text) history, oldest first.

    Client roles use "model" for assistant turns.
    """
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    for role, text in history:
        messages.append({"role": "assistant" if role == "model" else "user", "content": text})
    messages.append({"role": "user", "content": message})
    return messages
