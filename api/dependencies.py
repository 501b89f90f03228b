"""
API依赖项 - 组装存储应用服务
"""
from fastapi import Depends

from application.ports.notification import DeleteNotifierPort
from application.ports.storage import ObjectStorePort
from application.services.storage_service import StorageApplicationService
from infrastructure.external.messaging import get_delete_notifier
from infrastructure.external.storage import get_storage


async def get_object_store(store=Depends(get_storage)) -> ObjectStorePort:
    return store


async def get_notifier(notifier=Depends(get_delete_notifier)) -> DeleteNotifierPort:
    return notifier


async def get_storage_service(
    store: ObjectStorePort = Depends(get_object_store),
    notifier: DeleteNotifierPort = Depends(get_notifier),
) -> StorageApplicationService:
    return StorageApplicationService(store=store, notifier=notifier)
