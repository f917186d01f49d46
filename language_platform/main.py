# language_platform/main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from language_platform.api.v1.endpoints import auth, dashboard, health, lessons, progress, users
from language_platform.core.config import Settings, get_settings
from language_platform.core.logging_config import setup_logging
from language_platform.db.session import build_session_factory, create_db_engine
from language_platform.middleware.request_logging import RequestLoggingMiddleware
from language_platform.services.auth_service import AuthService
from language_platform.services.autosave import AutoSaveManager
from language_platform.services.lesson_service import LessonService
from language_platform.services.progress_service import ProgressService
from language_platform.services.progress_store import ProgressStore
from language_platform.services.user_service import UserService

logger = logging.getLogger('language_platform')


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Ningún hilo de auto-guardado sobrevive al apagado
    app.state.autosave_manager.stop_all()
    logger.info('Auto-save tasks stopped, shutting down')


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """
    Construye la aplicación con sus servicios.

    La configuración y la fábrica de sesiones se pueden inyectar (p. ej. en tests);
    si no se pasan se construyen desde el entorno.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if session_factory is None:
        session_factory = build_session_factory(create_db_engine(settings))

    app = FastAPI(
        title='Language Platform API',
        description='''
        ## Backend de la plataforma de aprendizaje de idiomas

        **Servicios Disponibles:**
        - **Authentication**: login con email/contraseña y tokens JWT
        - **Dashboard**: panel según el rol (administrador, instructor, estudiante)
        - **Users**: gestión de usuarios (administrador)
        - **Lessons**: CRUD de lecciones
        - **Progress**: progreso por lección y auto-guardado periódico
        ''',
        version='1.0.0',
        lifespan=lifespan,
    )

    progress_service = ProgressService(ProgressStore(session_factory))

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.auth_service = AuthService(session_factory)
    app.state.user_service = UserService(session_factory)
    app.state.lesson_service = LessonService(session_factory)
    app.state.progress_service = progress_service
    app.state.autosave_manager = AutoSaveManager(
        progress_service, interval_seconds=settings.AUTOSAVE_INTERVAL_SECONDS
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=['http://localhost:3000', 'http://localhost:5173'],
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, prefix='/api/v1', tags=['Health Check'])
    app.include_router(auth.router, prefix='/api/v1', tags=['Authentication'])
    app.include_router(dashboard.router, prefix='/api/v1', tags=['Dashboard'])
    app.include_router(users.router, prefix='/api/v1/users', tags=['Users'])
    app.include_router(lessons.router, prefix='/api/v1/lessons', tags=['Lessons'])
    app.include_router(progress.router, prefix='/api/v1/progress', tags=['Progress'])

    @app.get('/')
    def root():
        return {
            'message': 'Language Platform API',
            'status': 'operativo',
            'version': '1.0.0',
            'docs': '/docs',
            'autosave_interval_seconds': settings.AUTOSAVE_INTERVAL_SECONDS,
        }

    logger.info('Language Platform API created')
    return app


if __name__ == '__main__':
    import uvicorn
    uvicorn.run(create_app(), host='0.0.0.0', port=8000)
