from typing import List
from sqlalchemy.orm import Session
from school_directory.crud.base import CRUDBase
from school_directory.models.school import School
from school_directory.schemas.school import SchoolCreate

class CRUDSchool(CRUDBase[School, SchoolCreate]):

    def get_page(self, db: Session, *, skip: int = 0, limit: int = 10) -> List[School]:
        # Most recently added first; ids are unique so the order is total
        return self.get_multi(db, skip=skip, limit=limit, order_by=School.id.desc())

school = CRUDSchool(School)
