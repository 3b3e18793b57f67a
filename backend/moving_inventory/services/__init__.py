# Services module

from moving_inventory.services.audit_service import AuditService
from moving_inventory.services.activity_service import activity_feed, describe
from moving_inventory.services.totals_service import Totals, TotalsService
from moving_inventory.services.inventory_service import InventoryService
from moving_inventory.services.room_service import RoomService
from moving_inventory.services.item_service import ItemService
from moving_inventory.services.admin_service import AdminService

# External collaborators
from moving_inventory.services.crm_service import CrmService
from moving_inventory.services.upload_service import UploadService
