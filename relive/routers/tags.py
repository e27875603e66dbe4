from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from relive.database import get_db
from relive.models.tag import Tag
from relive.models.user import User
from relive.routers.auth import get_current_user_required
from relive.schemas.tag import TagCreate, TagList, TagCreated
from relive.services.memory_service import clean_tag_names, find_tag

router = APIRouter(prefix="/api/v1/tags", tags=["Tags"])


@router.get("/", response_model=TagList)
def list_tags(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    tags = db.query(Tag).filter(Tag.user_id == current_user.id).order_by(Tag.name.asc()).all()
    return {"tags": tags}


@router.post("/", response_model=TagCreated, status_code=status.HTTP_201_CREATED)
def create_tag(
    tag: TagCreate,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    names = clean_tag_names([tag.name])
    if not names:
        raise HTTPException(status_code=400, detail="Tag name is required")

    if find_tag(db, current_user.id, names[0]):
        raise HTTPException(status_code=400, detail="Tag already exists")

    db_tag = Tag(user_id=current_user.id, name=names[0])
    db.add(db_tag)
    db.commit()
    db.refresh(db_tag)
    return {"tag": db_tag}
