"""
Notification Templates - Locale catalogs and message rendering

Keys follow notifications.{entity_type}.{action}.{title|body}.
Placeholders use {name} and are filled from the event; unknown
placeholders are left as written.
"""
import re
from typing import Any, Dict, Optional

from ..domain.models import EventPayload
from ..config.settings import settings


NOTIFICATION_TEMPLATES: Dict[str, Dict[str, str]] = {
    "en": {
        # Customer
        "notifications.customer.created.title": "New customer",
        "notifications.customer.created.body": "{actorName} added customer {customerName}",
        "notifications.customer.updated.title": "Customer updated",
        "notifications.customer.updated.body": "{actorName} updated customer {customerName}: {changeSummary}",
        "notifications.customer.deleted.title": "Customer deleted",
        "notifications.customer.deleted.body": "{actorName} deleted customer {customerName}",
        # Ticket
        "notifications.ticket.created.title": "New ticket",
        "notifications.ticket.created.body": "{actorName} created ticket {ticketNumber} for {device}",
        "notifications.ticket.updated.title": "Ticket updated",
        "notifications.ticket.updated.body": "{actorName} updated ticket {ticketNumber}: {changeSummary}",
        "notifications.ticket.status_changed.title": "Ticket status changed",
        "notifications.ticket.status_changed.body": "{actorName} changed ticket {ticketNumber} status: {changeSummary}",
        "notifications.ticket.assigned.title": "Ticket assigned",
        "notifications.ticket.assigned.body": "{actorName} assigned ticket {ticketNumber} ({device})",
        "notifications.ticket.deleted.title": "Ticket deleted",
        "notifications.ticket.deleted.body": "{actorName} deleted ticket {ticketNumber}",
        # Payment
        "notifications.payment.created.title": "Payment received",
        "notifications.payment.created.body": "{actorName} recorded a payment of {amount} on ticket {ticketNumber}",
        # Charge
        "notifications.charge.added.title": "Charge added",
        "notifications.charge.added.body": "{actorName} added a charge to ticket {ticketNumber}: {changeSummary}",
        "notifications.charge.removed.title": "Charge removed",
        "notifications.charge.removed.body": "{actorName} removed a charge from ticket {ticketNumber}: {changeSummary}",
        # Repair job
        "notifications.repairjob.assigned.title": "Repair assigned",
        "notifications.repairjob.assigned.body": "{actorName} assigned you the repair of {device}",
        "notifications.repairjob.completed.title": "Repair completed",
        "notifications.repairjob.completed.body": "{actorName} completed the repair of {device}",
        "notifications.repairjob.updated.title": "Repair updated",
        "notifications.repairjob.updated.body": "{actorName} updated the repair of {device}: {changeSummary}",
        # Part
        "notifications.part.used.title": "Part used",
        "notifications.part.used.body": "{actorName} used {partName} on ticket {ticketNumber}",
        "notifications.part.removed.title": "Part removed",
        "notifications.part.removed.body": "{actorName} removed {partName} from ticket {ticketNumber}",
        "notifications.part.updated.title": "Part updated",
        "notifications.part.updated.body": "{actorName} updated part {partName} ({partSku})",
        "notifications.part.deleted.title": "Part deleted",
        "notifications.part.deleted.body": "{actorName} deleted part {partName} ({partSku})",
        # Supplier
        "notifications.supplier.created.title": "New supplier",
        "notifications.supplier.created.body": "{actorName} added supplier {supplierName}",
        "notifications.supplier.updated.title": "Supplier updated",
        "notifications.supplier.updated.body": "{actorName} updated supplier {supplierName}",
        "notifications.supplier.deleted.title": "Supplier deleted",
        "notifications.supplier.deleted.body": "{actorName} deleted supplier {supplierName}",
    },
    "fr": {
        "notifications.customer.created.title": "Nouveau client",
        "notifications.customer.created.body": "{actorName} a ajouté le client {customerName}",
        "notifications.customer.updated.title": "Client modifié",
        "notifications.customer.updated.body": "{actorName} a modifié le client {customerName} : {changeSummary}",
        "notifications.customer.deleted.title": "Client supprimé",
        "notifications.customer.deleted.body": "{actorName} a supprimé le client {customerName}",
        "notifications.ticket.created.title": "Nouveau ticket",
        "notifications.ticket.created.body": "{actorName} a créé le ticket {ticketNumber} pour {device}",
        "notifications.ticket.updated.title": "Ticket modifié",
        "notifications.ticket.updated.body": "{actorName} a modifié le ticket {ticketNumber} : {changeSummary}",
        "notifications.ticket.status_changed.title": "Statut du ticket modifié",
        "notifications.ticket.status_changed.body": "{actorName} a changé le statut du ticket {ticketNumber} : {changeSummary}",
        "notifications.ticket.assigned.title": "Ticket attribué",
        "notifications.ticket.assigned.body": "{actorName} a attribué le ticket {ticketNumber} ({device})",
        "notifications.ticket.deleted.title": "Ticket supprimé",
        "notifications.ticket.deleted.body": "{actorName} a supprimé le ticket {ticketNumber}",
        "notifications.payment.created.title": "Paiement reçu",
        "notifications.payment.created.body": "{actorName} a enregistré un paiement de {amount} sur le ticket {ticketNumber}",
        "notifications.charge.added.title": "Frais ajoutés",
        "notifications.charge.added.body": "{actorName} a ajouté des frais au ticket {ticketNumber} : {changeSummary}",
        "notifications.charge.removed.title": "Frais retirés",
        "notifications.charge.removed.body": "{actorName} a retiré des frais du ticket {ticketNumber} : {changeSummary}",
        "notifications.repairjob.assigned.title": "Réparation attribuée",
        "notifications.repairjob.assigned.body": "{actorName} vous a attribué la réparation de {device}",
        "notifications.repairjob.completed.title": "Réparation terminée",
        "notifications.repairjob.completed.body": "{actorName} a terminé la réparation de {device}",
        "notifications.repairjob.updated.title": "Réparation modifiée",
        "notifications.repairjob.updated.body": "{actorName} a modifié la réparation de {device} : {changeSummary}",
        "notifications.part.used.title": "Pièce utilisée",
        "notifications.part.used.body": "{actorName} a utilisé {partName} sur le ticket {ticketNumber}",
        "notifications.part.removed.title": "Pièce retirée",
        "notifications.part.removed.body": "{actorName} a retiré {partName} du ticket {ticketNumber}",
        "notifications.supplier.created.title": "Nouveau fournisseur",
        "notifications.supplier.created.body": "{actorName} a ajouté le fournisseur {supplierName}",
        "notifications.supplier.updated.title": "Fournisseur modifié",
        "notifications.supplier.updated.body": "{actorName} a modifié le fournisseur {supplierName}",
        "notifications.supplier.deleted.title": "Fournisseur supprimé",
        "notifications.supplier.deleted.body": "{actorName} a supprimé le fournisseur {supplierName}",
    },
    "ar": {
        "notifications.customer.created.title": "عميل جديد",
        "notifications.customer.created.body": "أضاف {actorName} العميل {customerName}",
        "notifications.customer.updated.title": "تم تحديث العميل",
        "notifications.customer.updated.body": "قام {actorName} بتحديث العميل {customerName}: {changeSummary}",
        "notifications.customer.deleted.title": "تم حذف العميل",
        "notifications.customer.deleted.body": "حذف {actorName} العميل {customerName}",
        "notifications.ticket.created.title": "تذكرة جديدة",
        "notifications.ticket.created.body": "أنشأ {actorName} التذكرة {ticketNumber} للجهاز {device}",
        "notifications.ticket.status_changed.title": "تغيرت حالة التذكرة",
        "notifications.ticket.status_changed.body": "غيّر {actorName} حالة التذكرة {ticketNumber}: {changeSummary}",
        "notifications.ticket.assigned.title": "تم إسناد التذكرة",
        "notifications.ticket.assigned.body": "أسند {actorName} التذكرة {ticketNumber} ({device})",
        "notifications.payment.created.title": "تم استلام دفعة",
        "notifications.payment.created.body": "سجّل {actorName} دفعة بقيمة {amount} على التذكرة {ticketNumber}",
        "notifications.charge.added.title": "تمت إضافة رسوم",
        "notifications.charge.added.body": "أضاف {actorName} رسومًا إلى التذكرة {ticketNumber}: {changeSummary}",
        "notifications.repairjob.assigned.title": "تم إسناد إصلاح",
        "notifications.repairjob.assigned.body": "أسند إليك {actorName} إصلاح {device}",
        "notifications.repairjob.completed.title": "اكتمل الإصلاح",
        "notifications.repairjob.completed.body": "أكمل {actorName} إصلاح {device}",
        "notifications.part.used.title": "تم استخدام قطعة",
        "notifications.part.used.body": "استخدم {actorName} القطعة {partName} في التذكرة {ticketNumber}",
    },
}

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


def get_template_key(event: EventPayload, part: str = "body") -> str:
    """Catalog key for an event"""
    return f"notifications.{event.entity_type.value}.{event.action.value}.{part}"


def interpolate(template: str, params: Dict[str, Any]) -> str:
    """Replace {name} placeholders found in params; leave the rest verbatim"""
    def _replace(match: "re.Match") -> str:
        name = match.group(1)
        if name in params and params[name] is not None:
            return str(params[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, template)


def build_template_params(event: EventPayload) -> Dict[str, Any]:
    """Parameter bag for an event: standard fields, then everything in meta"""
    params: Dict[str, Any] = {
        "entityId": event.entity_id,
        "ticketId": event.related_ticket_id or "",
        "ticketNumber": event.meta.get("ticketNumber") or event.related_ticket_id or "",
        "customerName": event.meta.get("customerName", ""),
        "actorName": event.actor_name,
        "summary": event.summary,
        "changeSummary": event.summary,
        "device": event.device.display_name() if event.device else "",
    }
    params.update(event.meta)
    return params


class TemplateRenderer:
    """
    Render locale-specific notification text

    Lookup order: requested locale, default locale, then the raw key.
    Never raises and never returns an empty string.
    """

    def __init__(
        self,
        catalogs: Optional[Dict[str, Dict[str, str]]] = None,
        default_locale: Optional[str] = None
    ):
        self._catalogs = catalogs if catalogs is not None else NOTIFICATION_TEMPLATES
        self._default_locale = default_locale or settings.default_locale

    def lookup(self, key: str, locale: Optional[str] = None) -> str:
        """Find a template string by key with locale fallback"""
        for candidate in (locale, self._default_locale):
            if not candidate:
                continue
            template = self._catalogs.get(candidate, {}).get(key)
            if template:
                return template
        return key

    def render_key(self, key: str, params: Dict[str, Any], locale: Optional[str] = None) -> str:
        return interpolate(self.lookup(key, locale), params)

    def render(self, event: EventPayload, locale: Optional[str] = None) -> str:
        """Notification body for an event"""
        return self.render_key(get_template_key(event, "body"), build_template_params(event), locale)

    def render_title(self, event: EventPayload, locale: Optional[str] = None) -> str:
        """Short notification title for an event"""
        return self.render_key(get_template_key(event, "title"), build_template_params(event), locale)
