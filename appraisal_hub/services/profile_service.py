from appraisal_hub.models.profile import EmployeeProfile
from appraisal_hub.schemas.profile import EmployeeProfileUpdate
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.employee_service import EmployeeService


class ProfileService(BaseService):
    def get(self, employee_id: str) -> EmployeeProfile:
        """Profile for ``employee_id``; an empty one is returned (unsaved) when none exists yet."""
        EmployeeService(self.db).get(employee_id)
        profile = self.db.get(EmployeeProfile, employee_id)
        return profile or EmployeeProfile(employee_id=employee_id, skills=[])

    def upsert(self, employee_id: str, data: EmployeeProfileUpdate) -> EmployeeProfile:
        EmployeeService(self.db).get(employee_id)
        profile = self.db.get(EmployeeProfile, employee_id)
        if profile is None:
            profile = EmployeeProfile(employee_id=employee_id, skills=[])
            self.db.add(profile)
        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "skills":
                value = list(dict.fromkeys(s.strip() for s in value or [] if s and s.strip()))
            setattr(profile, field, value)
        self.commit()
        self.db.refresh(profile)
        return profile
