from typing import Any, Dict, List, Optional

from appraisal_hub.core.exceptions import ConflictError, NotFoundError
from appraisal_hub.models.appraisal import Appraisal
from appraisal_hub.models.assignment import AppraisalAssignment, AssignmentStatus
from appraisal_hub.models.template import Template
from appraisal_hub.schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.scoring import flatten_items, total_weight, validate_template_weights
from appraisal_hub.services.template_migration import migrate_template_payload, needs_migration


class TemplateService(BaseService):
    """
    Template persistence. Every read goes through ``_ensure_current`` so
    callers only ever see the category shape, and every write is checked
    against the 100-point weight rule.
    """

    def _ensure_current(self, template: Template) -> Template:
        if not needs_migration(template):
            return template
        migrated = migrate_template_payload({
            "categories": template.categories,
            "questions": template.questions,
        })
        template.categories = migrated["categories"]
        template.questions = None
        template.schema_version = migrated["schema_version"]
        self.commit("templates")
        self.log_info(f"Migrated template {template.id} to schema v{template.schema_version}")
        return template

    def describe(self, template: Template) -> TemplateResponse:
        return TemplateResponse.model_validate(template).model_copy(update={
            "item_count": len(flatten_items(template.categories)),
            "total_weight": round(total_weight(template.categories), 2),
        })

    def list_templates(self, template_type: Optional[str] = None) -> List[Template]:
        query = self.db.query(Template)
        if template_type:
            query = query.filter(Template.type == template_type)
        return [self._ensure_current(t) for t in query.order_by(Template.name).all()]

    def get(self, template_id: str) -> Template:
        template = self.db.get(Template, template_id)
        if template is None:
            raise NotFoundError("Template", template_id)
        return self._ensure_current(template)

    def items(self, template_id: str) -> List[Dict[str, Any]]:
        return flatten_items(self.get(template_id).categories)

    def create(self, data: TemplateCreate) -> Template:
        payload = migrate_template_payload(data.model_dump(mode="json"))
        validate_template_weights(payload["categories"])
        template = Template(
            name=payload["name"],
            subtitle=payload.get("subtitle"),
            type=payload["type"],
            categories=payload["categories"],
            schema_version=payload["schema_version"],
            version=1,
        )
        self.db.add(template)
        self.commit("templates")
        self.db.refresh(template)
        self.log_info(f"Created template {template.id}", template_type=template.type)
        return template

    def update(self, template_id: str, data: TemplateUpdate) -> Template:
        template = self.get(template_id)
        changes = data.model_dump(mode="json", exclude_unset=True)
        if changes.get("categories") is not None:
            categories = migrate_template_payload({"categories": changes["categories"]})["categories"]
            validate_template_weights(categories)
            template.categories = categories
            template.version = (template.version or 1) + 1
        for field in ("name", "subtitle", "type"):
            if field in changes and (changes[field] is not None or field == "subtitle"):
                setattr(template, field, changes[field])
        self.commit("templates")
        self.db.refresh(template)
        return template

    def duplicate(self, template_id: str) -> Template:
        source = self.get(template_id)
        # Fresh ids so responses to the copy never collide with the original
        categories = [
            {**c, "id": None, "items": [{**i, "id": None} for i in c.get("items", [])]}
            for c in source.categories
        ]
        copy = Template(
            name=f"{source.name} (Copy)",
            subtitle=source.subtitle,
            type=source.type,
            categories=migrate_template_payload({"categories": categories})["categories"],
            version=1,
        )
        self.db.add(copy)
        self.commit("templates")
        self.db.refresh(copy)
        return copy

    def delete(self, template_id: str) -> None:
        template = self.get(template_id)
        open_assignments = self.db.query(AppraisalAssignment).filter(
            AppraisalAssignment.template_id == template_id,
            AppraisalAssignment.status != AssignmentStatus.COMPLETED.value,
        ).count()
        used = self.db.query(Appraisal).filter(Appraisal.template_id == template_id).count()
        if open_assignments or used:
            raise ConflictError(
                "Template is in use and cannot be deleted.",
                details={"open_assignments": open_assignments, "appraisals": used},
            )
        self.db.delete(template)
        self.commit("templates")
