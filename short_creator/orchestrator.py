"""
Orquestador Central
Cola de trabajos FIFO con un único hilo trabajador que produce los videos.
"""
import logging
import queue
import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from .domain.errors import NotFoundError
from .domain.models import Job, MusicMood, RenderConfig, SceneInput, VideoStatus
from .music.library import MusicSelector
from .pipeline import ScenePipeline

logger = logging.getLogger(__name__)


class ShortCreator:
    """
    El 'Director de Orquesta'.
    Recibe guiones, los encola y los produce de a uno, en orden de llegada.
    La cola vive solo en memoria: un reinicio pierde los trabajos pendientes.
    """

    def __init__(self, pipeline: ScenePipeline, music_selector: MusicSelector, videos_dir: Path):
        self.pipeline = pipeline
        self.music_selector = music_selector
        self.videos_dir = Path(videos_dir)
        self.videos_dir.mkdir(parents=True, exist_ok=True)

        self._queue: "queue.Queue[Optional[Job]]" = queue.Queue()
        # Trabajos encolados o en curso, en orden de llegada
        self._pending: Dict[str, Job] = {}
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._closed = False

    def enqueue(self, scenes: List[SceneInput], config: Optional[RenderConfig] = None) -> str:
        """
        Agrega un guión al final de la cola.

        Returns:
            ID del video
        """
        job = Job(id=uuid.uuid4().hex, scenes=list(scenes), config=config or RenderConfig())

        with self._lock:
            if self._closed:
                raise RuntimeError("El creador de videos está detenido")
            self._pending[job.id] = job
            self._queue.put(job)
            self._ensure_worker()

        logger.info(f"Video {job.id} encolado ({len(job.scenes)} escenas, {len(self._pending)} en cola)")
        return job.id

    def _ensure_worker(self) -> None:
        if self._worker is None or not self._worker.is_alive():
            self._worker = threading.Thread(
                target=self._process_queue, name="short-creator-worker", daemon=True
            )
            self._worker.start()

    def _process_queue(self) -> None:
        while True:
            job = self._queue.get()
            if job is None:
                self._queue.task_done()
                return

            logger.debug(f"Procesando video {job.id}: {job.config}")
            try:
                self.pipeline.run(job)
                logger.info(f"Video {job.id} creado correctamente")
            except Exception:
                logger.exception(f"Error creando el video {job.id}")
            finally:
                with self._lock:
                    self._pending.pop(job.id, None)
                self._queue.task_done()

    def status(self, video_id: str) -> VideoStatus:
        with self._lock:
            if video_id in self._pending:
                return VideoStatus.PROCESSING
        if self.get_video_path(video_id).exists():
            return VideoStatus.READY
        return VideoStatus.FAILED

    def get_video_path(self, video_id: str) -> Path:
        return self.videos_dir / f"{video_id}.mp4"

    def get_video(self, video_id: str) -> bytes:
        video_path = self.get_video_path(video_id)
        if not video_path.exists():
            raise NotFoundError(f"Video {video_id} no encontrado")
        return video_path.read_bytes()

    def delete_video(self, video_id: str) -> None:
        self.get_video_path(video_id).unlink(missing_ok=True)
        logger.debug(f"Video {video_id} eliminado")

    def list_music_tags(self) -> List[MusicMood]:
        return self.music_selector.moods()

    def wait_until_idle(self) -> None:
        """Bloquea hasta que la cola quede vacía."""
        self._queue.join()

    def shutdown(self, wait: bool = True) -> None:
        """Detiene el hilo trabajador después de los trabajos ya encolados."""
        with self._lock:
            self._closed = True
            worker = self._worker
            if worker is None or not worker.is_alive():
                return
            self._queue.put(None)
        if wait:
            worker.join()
