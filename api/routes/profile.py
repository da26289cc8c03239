"""
Endpoints de datos del usuario.

- PUT /api/update-profile: Actualiza datos personales y, opcionalmente, la foto de perfil
- GET /api/user: Devuelve persona + perfil de un usuario
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import get_person_and_profile, to_dict
from alerta_core.storage import ImageTooLargeError, StorageError, SupabaseImageStorage

from ..dependencies import get_image_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["usuario"])

PROFILE_IMAGES_FOLDER = "profile-images"


async def upload_image(
    storage: SupabaseImageStorage,
    folder: str,
    prefix: str,
    imagen: UploadFile,
) -> str:
    """
    Sube una imagen recibida por multipart y devuelve su URL pública.

    Raises:
        HTTPException 400: Imagen demasiado grande
        HTTPException 502: Error del almacenamiento
    """
    content = await imagen.read()
    try:
        return storage.upload_image(folder, prefix, imagen.filename or "", content, imagen.content_type)
    except ImageTooLargeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StorageError as e:
        raise HTTPException(status_code=502, detail=f"Error al subir la imagen: {str(e)}") from e


async def update_person_profile(
    id_persona: str,
    fields: Dict[str, Optional[str]],
    imagen: Optional[UploadFile],
    storage: SupabaseImageStorage,
) -> dict:
    """
    Aplica una actualización parcial sobre persona (y perfil cuando corresponde).

    Los campos vacíos o None se ignoran. Si llega una imagen se sube a
    `profile-images/` y su URL queda en persona.imagen_usuario y perfil.imagen_usuario.

    Args:
        id_persona: Usuario a actualizar
        fields: Campos de persona recibidos en el form
        imagen: Foto de perfil opcional
        storage: Almacenamiento de imágenes

    Returns:
        Respuesta con message (e imageUrl si se subió imagen)
    """
    updates = {k: v for k, v in fields.items() if v}
    has_image = imagen is not None and bool(imagen.filename)

    if not updates and not has_image:
        raise HTTPException(status_code=400, detail="No se proporcionaron datos para actualizar.")

    with get_db_session() as session:
        person, profile = get_person_and_profile(session, id_persona)
        if not person:
            raise HTTPException(status_code=404, detail=f"Usuario {id_persona} no encontrado")

        image_url = None
        if has_image:
            image_url = await upload_image(storage, PROFILE_IMAGES_FOLDER, id_persona, imagen)
            updates["imagen_usuario"] = image_url

        for key, value in updates.items():
            setattr(person, key, value)

        if profile:
            if "correo" in updates:
                profile.correo = updates["correo"]
            if image_url:
                profile.imagen_usuario = image_url

        logger.info(f"Perfil actualizado: {id_persona} ({', '.join(updates)})")

        response = {"message": "Perfil actualizado exitosamente."}
        if image_url:
            response["imageUrl"] = image_url
        return response


@router.put("/update-profile")
async def update_profile(
    uid: str = Form(..., min_length=1),
    nombre: Optional[str] = Form(None),
    apellido: Optional[str] = Form(None),
    numero_telefono: Optional[str] = Form(None),
    direccion: Optional[str] = Form(None),
    correo: Optional[str] = Form(None),
    fecha_nacimiento: Optional[str] = Form(None),
    imagen_usuario: Optional[UploadFile] = File(None),
    storage: SupabaseImageStorage = Depends(get_image_storage),
):
    """Actualiza el perfil del propio usuario (multipart/form-data)."""
    return await update_person_profile(
        uid,
        {
            "nombre": nombre,
            "apellido": apellido,
            "numero_telefono": numero_telefono,
            "direccion": direccion,
            "correo": correo,
            "fecha_nacimiento": fecha_nacimiento,
        },
        imagen_usuario,
        storage,
    )


@router.get("/user")
async def get_user(uid: str = Query(..., min_length=1)):
    """
    Devuelve la persona y el perfil de un usuario.

    Si falta alguno de los dos responde 200 con `usuarioData` vacío.
    """
    with get_db_session() as session:
        person, profile = get_person_and_profile(session, uid)
        if not person or not profile:
            return {"message": "Usuario no encontrado.", "usuarioData": []}

        return {
            "persona": to_dict(person),
            "perfil": to_dict(profile),
        }
