# outreach/prompts/common_prompts.py
"""
Operator-facing texts: notices, labels and share texts.
"""

# ============================================================================
# NOTICES
# ============================================================================

GENERATION_FAILED = "Erro ao gerar mensagem. Verifique sua conexão."
GENERATION_SUCCEEDED = "Mensagem criada para {patient_name}."
CAPTURE_FAILED = "Erro ao criar imagem. Tente novamente."
SHARE_FAILED = "Compartilhamento cancelado ou falhou."
DOWNLOAD_READY = "Imagem salva como {filename}."
COPY_FAILED = "Não foi possível copiar a mensagem."
LINK_OPEN_FAILED = "Não foi possível abrir o WhatsApp."

# ============================================================================
# SHARE
# ============================================================================

SHARE_TITLE = "Orientação Médica"
SHARE_TEXT = "Olá {patient_name}, segue orientação médica."

# ============================================================================
# LABELS
# ============================================================================

STEP_COUNTER = "Passo {step}/{total}"

TONE_LABELS = {
    "professional": "Sério",
    "empathetic": "Empático",
    "motivational": "Motivador",
}
