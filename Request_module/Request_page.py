"""
Intake form page - serves the vendor / purchase request form to browsers.
"""
from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from .Request_schema import COMPANY_NAMES, VENDOR_SELECTION_LABELS

router = APIRouter(tags=["Request Form"])


def _options(pairs):
    return "\n".join(f'      <option value="{value}">{label}</option>' for value, label in pairs)


@router.get("/request-form", response_class=HTMLResponse)
def request_form_page():
    """Serve the request form as HTML (for browsers)."""
    return _REQUEST_FORM_HTML.replace(
        "{company_options}", _options((name, name) for name in COMPANY_NAMES)
    ).replace(
        "{vendor_options}", _options((v.value, label) for v, label in VENDOR_SELECTION_LABELS.items())
    )


_REQUEST_FORM_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Vendor Management Input System</title>
  <style>
    * { box-sizing: border-box; }
    body { font-family: system-ui, -apple-system, sans-serif; max-width: 640px; margin: 2rem auto; padding: 0 1rem; }
    h1 { font-size: 1.5rem; margin-bottom: 0.25rem; }
    p.subtitle { color: #64748b; margin-top: 0; margin-bottom: 1.5rem; }
    .row { display: grid; grid-template-columns: 1fr 1fr; gap: 1rem; }
    label { display: block; margin-bottom: 0.25rem; font-weight: 500; }
    input, textarea, select { width: 100%; padding: 0.5rem 0.75rem; margin-bottom: 1rem; border: 1px solid #ccc; border-radius: 6px; }
    textarea { min-height: 80px; resize: vertical; }
    button { width: 100%; padding: 0.75rem; background: #0f172a; color: white; border: none; border-radius: 6px; font-weight: 600; cursor: pointer; }
    button:disabled { opacity: 0.6; cursor: wait; }
    .optional { color: #64748b; font-weight: 400; }
    .toast { position: fixed; right: 1rem; bottom: 1rem; max-width: 360px; padding: 1rem; border-radius: 6px; display: none; box-shadow: 0 4px 12px rgba(0,0,0,0.15); }
    .toast.success { background: #dcfce7; color: #166534; }
    .toast.error { background: #fee2e2; color: #991b1b; }
    .toast strong { display: block; margin-bottom: 0.25rem; }
  </style>
</head>
<body>
  <h1>Vendor Management Input System</h1>
  <p class="subtitle">Submit a request to purchase products or services</p>
  <form id="requestForm">
    <div class="row">
      <div>
        <label for="requestorName">Requestor Name</label>
        <input type="text" id="requestorName" name="requestorName" required>
      </div>
      <div>
        <label for="department">Department</label>
        <input type="text" id="department" name="department" required>
      </div>
    </div>

    <label for="companyName">Company Name</label>
    <select id="companyName" name="companyName" required>
      <option value="" disabled selected>Select a company</option>
{company_options}
    </select>

    <label for="email">Email</label>
    <input type="email" id="email" name="email" required>

    <label for="contactPhone">Contact Phone Number</label>
    <input type="text" id="contactPhone" name="contactPhone" required>

    <label for="description">Brief description of goods or services being requested</label>
    <textarea id="description" name="description" required></textarea>

    <label for="vendorSelection">Has the business selected a vendor or do they need one?</label>
    <select id="vendorSelection" name="vendorSelection" required>
      <option value="" disabled selected>Select an option</option>
{vendor_options}
    </select>

    <label for="completionDate">Requested completion date <span class="optional">(optional)</span></label>
    <input type="date" id="completionDate" name="completionDate">

    <button type="submit" id="submitButton">Submit Request</button>
  </form>
  <div id="toast" class="toast" role="status"><strong id="toastTitle"></strong><span id="toastBody"></span></div>

  <script>
    // Earliest selectable date: dates before now + 1 day are disabled
    (function() {
      const boundary = new Date(Date.now() + 24 * 60 * 60 * 1000);
      const first = new Date(boundary.getFullYear(), boundary.getMonth(), boundary.getDate());
      if (first < boundary) first.setDate(first.getDate() + 1);
      const pad = (n) => String(n).padStart(2, '0');
      document.getElementById('completionDate').min =
        first.getFullYear() + '-' + pad(first.getMonth() + 1) + '-' + pad(first.getDate());
    })();

    function showToast(kind, title, body) {
      const el = document.getElementById('toast');
      document.getElementById('toastTitle').textContent = title;
      document.getElementById('toastBody').textContent = body;
      el.className = 'toast ' + kind;
      el.style.display = 'block';
      setTimeout(function() { el.style.display = 'none'; }, 5000);
    }

    document.getElementById('requestForm').addEventListener('submit', async function(e) {
      e.preventDefault();
      const form = e.target;
      const button = document.getElementById('submitButton');
      const body = {
        requestorName: form.requestorName.value,
        department: form.department.value,
        companyName: form.companyName.value,
        email: form.email.value,
        contactPhone: form.contactPhone.value,
        description: form.description.value,
        vendorSelection: form.vendorSelection.value
      };
      if (form.completionDate.value) {
        body.completionDate = form.completionDate.value;
      }

      button.disabled = true;
      try {
        const res = await fetch(window.location.origin + '/api/submit-request', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body)
        });
        const data = await res.json().catch(() => ({}));

        if (res.ok) {
          showToast('success', 'Request Submitted', 'Your purchase request has been submitted successfully.');
          form.reset();
        } else {
          showToast('error', 'Submission Failed', data.message || 'Something went wrong. Please try again.');
        }
      } catch (err) {
        showToast('error', 'Submission Failed', 'Network error. Please try again.');
      } finally {
        button.disabled = false;
      }
    });
  </script>
</body>
</html>
"""
