"""Invitation email rendering."""

from html import escape

from roster.domain.service.notification import InviteNotification


def invite_subject(notification: InviteNotification) -> str:
    return f"You've been invited to join {notification.organization_name}"


def render_invite_email(notification: InviteNotification, expiry_days: int = 7) -> str:
    """Render the invitation email body as HTML.

    Args:
        notification: Invitation details
        expiry_days: Invite lifetime stated in the footer

    Returns:
        HTML document
    """
    organization = escape(notification.organization_name)
    inviter = escape(notification.inviter_name)
    role = escape(notification.role.display_name)
    url = escape(notification.invite_url, quote=True)

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Invitation to Join {organization}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #4f46e5; padding: 30px; text-align: center; border-radius: 8px 8px 0 0;">
    <h1 style="color: white; margin: 0;">You've Been Invited!</h1>
  </div>
  <div style="background: #ffffff; padding: 30px; border: 1px solid #e0e0e0; border-top: none; border-radius: 0 0 8px 8px;">
    <p style="font-size: 16px;">Hello,</p>
    <p style="font-size: 16px;">
      <strong>{inviter}</strong> has invited you to join <strong>{organization}</strong> as a <strong>{role}</strong>.
    </p>
    <div style="text-align: center; margin: 40px 0;">
      <a href="{url}" style="display: inline-block; background: #4f46e5; color: white; padding: 14px 28px; text-decoration: none; border-radius: 6px; font-weight: 600;">
        Accept Invitation
      </a>
    </div>
    <p style="font-size: 14px; color: #666; border-top: 1px solid #e0e0e0; padding-top: 20px;">
      Or copy and paste this link into your browser:<br>
      <a href="{url}" style="color: #4f46e5; word-break: break-all;">{url}</a>
    </p>
    <p style="font-size: 12px; color: #999;">
      This invitation will expire in {expiry_days} days. If you didn't expect this invitation, you can safely ignore this email.
    </p>
  </div>
  <div style="text-align: center; margin-top: 20px; color: #999; font-size: 12px;">
    <p>This email was sent by {organization}</p>
  </div>
</body>
</html>"""
