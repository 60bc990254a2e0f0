"""Baseline reference records for the MUAC store.

MUAC (mid-upper arm circumference) bands follow the WHO/UNICEF cut-offs:
severe acute malnutrition below the severe threshold, moderate up to the
normal threshold, adequate from the normal threshold on. The follow-up band
is not value based; it marks patients under post-intervention tracking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .config import settings

MUAC_CODE_RED = "MUAC-R1"
MUAC_CODE_YELLOW = "MUAC-Y1"
MUAC_CODE_GREEN = "MUAC-G1"
MUAC_CODE_FOLLOW = "MUAC-S1"

# Codes with a numeric band; every seeded store must carry a tag and a
# recommendation for each of them.
NUMERIC_MUAC_CODES = (MUAC_CODE_RED, MUAC_CODE_YELLOW, MUAC_CODE_GREEN)
MUAC_CODES = NUMERIC_MUAC_CODES + (MUAC_CODE_FOLLOW,)

COLOR_RED = "#dc3545"
COLOR_YELLOW = "#ffc107"
COLOR_GREEN = "#28a745"
COLOR_BLUE = "#17a2b8"
COLOR_GRAY = "#6c757d"

# Recommendation priorities (1-3).
PRIORITY_NORMAL = 1
PRIORITY_ATTENTION = 2
PRIORITY_URGENT = 3

# Tag priorities (1-10).
PRIORITY_LOW = 1
PRIORITY_MEDIUM = 3
PRIORITY_HIGH = 5
PRIORITY_EXTREME = 8

ROLE_ADMIN = "ADMINISTRADOR"
ROLE_SUPERVISOR = "SUPERVISOR"
ROLE_GUARDIAN = "APODERADO"
REQUIRED_ROLES = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_GUARDIAN)

TAG_RED = "MUAC-R1"
TAG_YELLOW = "MUAC-Y1"
TAG_GREEN = "MUAC-G1"
TAG_FOLLOW = "SEGUIMIENTO"

REC_RED = "🚨 ALERTA ROJA - Acción Urgente Requerida"
REC_YELLOW = "🟡 ALERTA AMARILLA - Zona de Riesgo Nutricional"
REC_GREEN = "✅ ZONA VERDE - Estado Nutricional Adecuado"
REC_FOLLOW = "📋 Seguimiento Post-Intervención"

FAQ_CATEGORY_TAPE_AND_APP = "SOBRE EL USO DE LA CINTA Y EL APP"
FAQ_CATEGORY_RESULTS = "SOBRE LOS RESULTADOS Y LO QUE DEBO HACER"
FAQ_CATEGORY_HEALTH_CENTERS = "SOBRE LOS CENTROS DE SALUD Y EL APOYO LOCAL"
FAQ_CATEGORY_PRIVACY = "SOBRE PRIVACIDAD Y SEGURIDAD"
FAQ_CATEGORY_OTHER = "OTRAS PREGUNTAS"

MIN_MUAC_CM = 0.0
MAX_MUAC_CM = 50.0


@dataclass(frozen=True)
class BandThresholds:
    severe: float
    moderate: float
    normal: float

    @classmethod
    def from_settings(cls) -> "BandThresholds":
        return cls(
            severe=settings.muac_threshold_severe,
            moderate=settings.muac_threshold_moderate,
            normal=settings.muac_threshold_normal,
        )


def classify_muac(value_cm: float, thresholds: BandThresholds) -> str:
    """Return the numeric band code for a measurement.

    A value exactly at the severe threshold is moderate, and the gap between
    the moderate and normal thresholds (12.4-12.5 cm by default) is still
    moderate; adequate starts at the normal threshold.
    """

    if not MIN_MUAC_CM < value_cm <= MAX_MUAC_CM:
        raise ValueError(f"MUAC value out of range: {value_cm}")
    if value_cm >= thresholds.normal:
        return MUAC_CODE_GREEN
    if value_cm >= thresholds.severe:
        return MUAC_CODE_YELLOW
    return MUAC_CODE_RED


def baseline_roles() -> list[dict[str, Any]]:
    return [
        {
            "name": ROLE_ADMIN,
            "description": "Acceso completo al sistema MUAC - Gestión de usuarios, configuración y reportes",
        },
        {
            "name": ROLE_SUPERVISOR,
            "description": "Supervisión de apoderados, análisis de mediciones y reportes regionales",
        },
        {
            "name": ROLE_GUARDIAN,
            "description": "Registro de mediciones MUAC de pacientes asignados en campo",
        },
    ]


def baseline_tags(thresholds: BandThresholds) -> list[dict[str, Any]]:
    return [
        {
            "name": TAG_RED,
            "description": (
                f"Alerta Roja - Desnutrición aguda severa (SAM) - < {thresholds.severe:.1f} cm"
            ),
            "color": COLOR_RED,
            "muac_code": MUAC_CODE_RED,
            "priority": PRIORITY_EXTREME,
        },
        {
            "name": TAG_YELLOW,
            "description": (
                "Alerta Amarilla - Desnutrición aguda moderada (MAM) - "
                f"{thresholds.severe:.1f}-{thresholds.moderate:.1f} cm"
            ),
            "color": COLOR_YELLOW,
            "muac_code": MUAC_CODE_YELLOW,
            "priority": PRIORITY_HIGH,
        },
        {
            "name": TAG_GREEN,
            "description": f"Zona Verde - Estado nutricional adecuado - ≥ {thresholds.normal:.1f} cm",
            "color": COLOR_GREEN,
            "muac_code": MUAC_CODE_GREEN,
            "priority": PRIORITY_LOW,
        },
        {
            "name": TAG_FOLLOW,
            "description": "Paciente en seguimiento post-intervención nutricional",
            "color": COLOR_BLUE,
            "muac_code": MUAC_CODE_FOLLOW,
            "priority": PRIORITY_MEDIUM,
        },
    ]


def baseline_recommendations(thresholds: BandThresholds) -> list[dict[str, Any]]:
    return [
        {
            "name": REC_RED,
            "description": (
                "⚠️ Esta medición indica DESNUTRICIÓN AGUDA SEVERA (SAM). Tu niño o niña necesita "
                "atención médica URGENTE.\n\n"
                "ACCIONES INMEDIATAS:\n"
                "1. 🏥 Acude HOY MISMO al establecimiento de salud más cercano\n"
                "2. 🚫 No retrases la consulta, incluso si el niño parece estar bien\n"
                "3. 💧 Mientras te trasladas: mantén hidratado con agua hervida\n"
                "4. 🍌 Ofrece alimentos fáciles: plátano sancochado, puré de yuca, mazamorra\n"
                "5. 📞 Si no puedes movilizarte: contacta al agente comunitario de salud\n"
                "6. 🔄 Repite la medición solo DESPUÉS de la consulta médica\n\n"
                "⚠️ Este resultado no sustituye un diagnóstico médico."
            ),
            "recommendation_umbral": f"< {thresholds.severe:.1f} cm",
            "min_value": None,
            "max_value": thresholds.severe,
            "priority": PRIORITY_URGENT,
            "color_code": COLOR_RED,
            "muac_code": MUAC_CODE_RED,
        },
        {
            "name": REC_YELLOW,
            "description": (
                "🟡 Tu niño o niña está en RIESGO NUTRICIONAL (MAM). No es emergencia, pero es "
                "momento de fortalecer su alimentación.\n\n"
                "ACCIONES RECOMENDADAS:\n"
                "1. 🏥 Solicita evaluación en el centro de salud en los próximos 5 días\n"
                "2. 🍳 Mejora la alimentación con productos locales: huevos, pescado, sangrecita, "
                "camu camu, aguaje, plátano, quinua, maní\n"
                "3. 🍽️ Aumenta la frecuencia a 4-5 comidas diarias\n"
                "4. 🚫 Evita ultraprocesados (galletas, gaseosas, embutidos)\n"
                "5. 📅 Nuevo control MUAC en 7 días\n"
                "6. 🌡️ Si hay fiebre, diarrea o pérdida de apetito: acude antes"
            ),
            "recommendation_umbral": f"{thresholds.severe:.1f} - {thresholds.moderate:.1f} cm",
            "min_value": thresholds.severe,
            "max_value": thresholds.moderate,
            "priority": PRIORITY_ATTENTION,
            "color_code": COLOR_YELLOW,
            "muac_code": MUAC_CODE_YELLOW,
        },
        {
            "name": REC_GREEN,
            "description": (
                "✅ ¡Excelente! Tu niño o niña tiene BUEN ESTADO NUTRICIONAL.\n\n"
                "ACCIONES PARA MANTENER LA SALUD:\n"
                "1. 🥗 Mantén una alimentación balanceada con productos locales\n"
                "2. 📅 Controles CRED según edad (cada 2-3 meses)\n"
                "3. 📏 Medición MUAC mensual o si baja el apetito\n"
                "4. 🤝 Comparte esta herramienta con otras familias"
            ),
            "recommendation_umbral": f"≥ {thresholds.normal:.1f} cm",
            "min_value": thresholds.normal,
            "max_value": None,
            "priority": PRIORITY_NORMAL,
            "color_code": COLOR_GREEN,
            "muac_code": MUAC_CODE_GREEN,
        },
        {
            "name": REC_FOLLOW,
            "description": (
                "📋 Paciente en proceso de RECUPERACIÓN NUTRICIONAL.\n\n"
                "PROTOCOLO DE SEGUIMIENTO:\n"
                "1. 💊 Continuar el plan alimentario del centro de salud\n"
                "2. 📅 Controles semanales obligatorios\n"
                "3. ⚖️ Monitoreo de peso y talla\n"
                "4. 📱 Registro diario de alimentos consumidos\n"
                "5. 🚨 Alerta inmediata si empeoran los síntomas"
            ),
            "recommendation_umbral": "Todas las mediciones",
            "min_value": None,
            "max_value": None,
            "priority": PRIORITY_ATTENTION,
            "color_code": COLOR_BLUE,
            "muac_code": MUAC_CODE_FOLLOW,
        },
    ]


# Attributes introduced after the first releases; reconcile fills them in by name.
TAG_CODE_PATCHES: dict[str, dict[str, Any]] = {
    TAG_RED: {"muac_code": MUAC_CODE_RED, "color": COLOR_RED, "priority": PRIORITY_EXTREME},
    TAG_YELLOW: {"muac_code": MUAC_CODE_YELLOW, "color": COLOR_YELLOW, "priority": PRIORITY_HIGH},
    TAG_GREEN: {"muac_code": MUAC_CODE_GREEN, "color": COLOR_GREEN, "priority": PRIORITY_LOW},
    TAG_FOLLOW: {"muac_code": MUAC_CODE_FOLLOW, "color": COLOR_BLUE, "priority": PRIORITY_MEDIUM},
}

RECOMMENDATION_CODE_PATCHES: dict[str, dict[str, Any]] = {
    REC_RED: {"muac_code": MUAC_CODE_RED, "color_code": COLOR_RED, "priority": PRIORITY_URGENT},
    REC_YELLOW: {"muac_code": MUAC_CODE_YELLOW, "color_code": COLOR_YELLOW, "priority": PRIORITY_ATTENTION},
    REC_GREEN: {"muac_code": MUAC_CODE_GREEN, "color_code": COLOR_GREEN, "priority": PRIORITY_NORMAL},
    REC_FOLLOW: {"muac_code": MUAC_CODE_FOLLOW, "color_code": COLOR_BLUE, "priority": PRIORITY_ATTENTION},
}


_FAQS: tuple[tuple[str, str, str], ...] = (
    (
        FAQ_CATEGORY_TAPE_AND_APP,
        "¿Qué es la cinta MUAC?",
        "Es una cinta que mide el perímetro del brazo (circunferencia media del brazo). "
        "Sus colores indican rápidamente si un niño o niña de 6 a 59 meses tiene riesgo de desnutrición.",
    ),
    (
        FAQ_CATEGORY_TAPE_AND_APP,
        "¿Cómo se mide correctamente el brazo?",
        "Usa el brazo izquierdo relajado. Ubica el punto medio entre el hombro y el codo, "
        "rodea el brazo con la cinta sin apretar ni dejarla suelta y lee el valor en centímetros.",
    ),
    (
        FAQ_CATEGORY_TAPE_AND_APP,
        "¿Necesito internet para registrar una medición?",
        "No. La medición se guarda en el teléfono y se envía cuando vuelva la conexión.",
    ),
    (
        FAQ_CATEGORY_RESULTS,
        "¿Qué significa el color rojo?",
        "Indica desnutrición aguda severa. Acude hoy mismo al establecimiento de salud más cercano.",
    ),
    (
        FAQ_CATEGORY_RESULTS,
        "¿Qué significa el color amarillo?",
        "Indica riesgo nutricional (desnutrición aguda moderada). Solicita una evaluación en los "
        "próximos días y mejora la alimentación con productos locales.",
    ),
    (
        FAQ_CATEGORY_RESULTS,
        "¿Qué significa el color verde?",
        "El estado nutricional es adecuado. Continúa con la alimentación balanceada y los controles.",
    ),
    (
        FAQ_CATEGORY_HEALTH_CENTERS,
        "¿A dónde acudo si el resultado es rojo o amarillo?",
        "Al puesto o centro de salud más cercano. Si no puedes movilizarte, contacta al agente "
        "comunitario de salud de tu localidad.",
    ),
    (
        FAQ_CATEGORY_HEALTH_CENTERS,
        "¿La atención en el centro de salud tiene costo?",
        "Los controles de crecimiento y desarrollo (CRED) para menores de 5 años son gratuitos "
        "con el Seguro Integral de Salud.",
    ),
    (
        FAQ_CATEGORY_PRIVACY,
        "¿Quién puede ver los datos de mi niño o niña?",
        "Solo el personal de salud y los supervisores autorizados de tu zona.",
    ),
    (
        FAQ_CATEGORY_PRIVACY,
        "¿Puedo pedir que se borren mis datos?",
        "Sí. Solicítalo al supervisor de tu localidad y se eliminarán los registros asociados.",
    ),
    (
        FAQ_CATEGORY_OTHER,
        "¿Esta herramienta reemplaza al médico?",
        "No. Es una herramienta de alerta familiar y no sustituye un diagnóstico médico.",
    ),
)


def baseline_faqs() -> list[dict[str, Any]]:
    return [
        {"category": category, "question": question, "answer": answer}
        for category, question, answer in _FAQS
    ]


def faq_category_by_question() -> dict[str, str]:
    return {question: category for category, question, _answer in _FAQS}
