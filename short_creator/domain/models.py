"""
Modelos de Dominio (Clean Architecture)
Definen la estructura de datos central del sistema.
"""
from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class MusicMood(str, Enum):
    """Estados de ánimo disponibles en el catálogo de música."""
    SAD = "sad"
    MELANCHOLIC = "melancholic"
    HAPPY = "happy"
    EUPHORIC = "euphoric/ecstatic"
    EXCITED = "excited"
    CHILL = "chill"
    UNEASY = "uneasy"
    ANGRY = "angry"
    DARK = "dark"
    HOPEFUL = "hopeful"
    CONTEMPLATIVE = "contemplative"
    FUNNY = "funny/quirky"


class VideoStatus(str, Enum):
    """Estado derivado de un video (nunca se persiste)."""
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class SceneInput(BaseModel):
    """Una escena del guión tal como la entrega el usuario."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., description="Texto que se narra en esta escena")
    search_terms: List[str] = Field(
        ..., alias="searchTerms", description="Palabras clave para buscar el clip"
    )


class RenderConfig(BaseModel):
    """Opciones de render para un video completo."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    padding_back: Optional[NonNegativeInt] = Field(
        None, alias="paddingBack", description="Milisegundos extra al final del video"
    )
    music: Optional[MusicMood] = None


class Job(BaseModel):
    """Trabajo encolado: un guión completo pendiente de producir."""
    id: str
    scenes: List[SceneInput]
    config: RenderConfig = Field(default_factory=RenderConfig)


class Caption(BaseModel):
    """Subtítulo con tiempos en milisegundos."""
    model_config = ConfigDict(populate_by_name=True)

    text: str
    start_ms: int = Field(..., alias="startMs")
    end_ms: int = Field(..., alias="endMs")


class Offsets(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: int = Field(..., alias="from")
    to: int


class TranscriptionToken(BaseModel):
    text: str
    offsets: Offsets


class TranscriptionRecord(BaseModel):
    """Segmento devuelto por el motor de transcripción, con sus tokens."""
    text: str
    offsets: Offsets
    tokens: List[TranscriptionToken] = Field(default_factory=list)


class FootageItem(BaseModel):
    """Clip de stock seleccionado para una escena."""
    id: str
    url: str
    width: int
    height: int


class SpeechResult(BaseModel):
    """Audio sintetizado en memoria y su duración en segundos."""
    audio: bytes
    duration: float


class SceneAudio(BaseModel):
    url: str
    duration: float


class Scene(BaseModel):
    """
    Una unidad atómica de narrativa audiovisual ya resuelta.
    Sincroniza subtítulos, audio y el clip visual.
    """
    captions: List[Caption]
    video: str
    audio: SceneAudio


class Music(BaseModel):
    """Pista del catálogo de música de fondo."""
    file: str
    mood: MusicMood
    start: float = 0.0
    end: Optional[float] = None
    path: Optional[Path] = None


class Composition(BaseModel):
    """Todo lo que necesita el renderizador para producir el video final."""
    music: Music
    scenes: List[Scene]
    duration_ms: float
    padding_back: Optional[int] = None

    @property
    def duration(self) -> float:
        return self.duration_ms / 1000
